"""
Repositório de usuários e sessão.

O núcleo de cálculo não acessa este módulo; ele serve apenas à casca de
interface, que injeta o repositório desejado (memória ou arquivo JSON).
"""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import time
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from .logging_config import log
from .models import User

PBKDF2_ITERATIONS = 200_000

DEFAULT_ADMIN_EMAIL = os.getenv("AUDITORIA_ADMIN_EMAIL", "admin@localhost")
DEFAULT_ADMIN_PASSWORD = os.getenv("AUDITORIA_ADMIN_PASSWORD", "admin")


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    salt = salt or os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash or "$" not in password_hash:
        return False
    salt_hex, _ = password_hash.split("$", 1)
    return hmac.compare_digest(hash_password(password, bytes.fromhex(salt_hex)), password_hash)


class UserRepository(Protocol):
    def list(self) -> List[User]: ...
    def get(self, user_id: str) -> Optional[User]: ...
    def save(self, user: User) -> None: ...
    def delete(self, user_id: str) -> None: ...


class InMemoryUserRepository:
    def __init__(self, users: Optional[List[User]] = None):
        self._users: Dict[str, User] = {u.id: u for u in users or []}

    def list(self) -> List[User]:
        return list(self._users.values())

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def save(self, user: User) -> None:
        self._users[user.id] = user

    def delete(self, user_id: str) -> None:
        self._users.pop(user_id, None)


class JsonUserRepository:
    """Usuários persistidos em um único arquivo JSON."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> List[User]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return [User.model_validate(u) for u in data]

    def _write(self, users: List[User]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [u.model_dump() for u in users]
        self.path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    def list(self) -> List[User]:
        return self._read()

    def get(self, user_id: str) -> Optional[User]:
        return next((u for u in self._read() if u.id == user_id), None)

    def save(self, user: User) -> None:
        users = [u for u in self._read() if u.id != user.id]
        users.append(user)
        self._write(users)

    def delete(self, user_id: str) -> None:
        self._write([u for u in self._read() if u.id != user_id])


def init_storage(repo: UserRepository) -> None:
    """Cria o administrador padrão quando não há usuários."""
    if repo.list():
        return
    repo.save(User(
        id="admin-01",
        name="Administrador",
        email=DEFAULT_ADMIN_EMAIL,
        password_hash=hash_password(DEFAULT_ADMIN_PASSWORD),
        role="admin",
        created_at=time.time(),
    ))
    log.info("Usuário administrador padrão criado")


class Session:
    """Sessão do usuário ativo; guarda apenas o id, nunca a senha."""

    def __init__(self, repo: UserRepository):
        self.repo = repo
        self._user_id: Optional[str] = None

    @property
    def current(self) -> Optional[User]:
        if self._user_id is None:
            return None
        return self.repo.get(self._user_id)

    def login(self, email: str, password: str) -> Optional[User]:
        email = (email or "").strip().lower()
        user = next((u for u in self.repo.list() if u.email.lower() == email), None)
        if user is None or not verify_password(password, user.password_hash):
            log.warning(f"Falha de login para {email}")
            return None
        self._user_id = user.id
        return user

    def logout(self) -> None:
        self._user_id = None
