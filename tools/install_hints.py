"""tools/install_hints.py

Human hints printed next to a missing-tool error.

The runtime never installs anything itself; it only says how.
"""

from __future__ import annotations

from typing import Dict

INSTALL_HINTS: Dict[str, str] = {
    "node": "Install Node.js via nvm: nvm install --lts (https://nodejs.org)",
    "npm": "npm ships with Node.js: https://nodejs.org",
    "pnpm": "corepack enable pnpm (or: npm install -g pnpm)",
    "yarn": "corepack enable yarn (or: npm install -g yarn)",
    "python3": "Install Python 3: https://www.python.org/downloads/",
    "docker": "Install Docker: https://docs.docker.com/get-docker/",
    "git": "Install Git: https://git-scm.com/downloads",
    "kubectl": "Install kubectl: https://kubernetes.io/docs/tasks/tools/",
    "helm": "Install Helm: https://helm.sh/docs/intro/install/",
    "gh": "Install the GitHub CLI: https://cli.github.com/",
    "psql": "Install the PostgreSQL client (e.g. apt install postgresql-client)",
    "mysql": "Install the MySQL client (e.g. apt install mysql-client)",
}


def suggest_install(tool: str) -> str:
    return INSTALL_HINTS.get(tool, f"Install '{tool}' and make sure it is on PATH.")
