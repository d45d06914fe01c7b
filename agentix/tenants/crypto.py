import hashlib
import json
import os
from typing import Any, Dict, Optional
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from agentix.config.settings import config_settings
from agentix.tenants.constants import IV_LENGTH, TAG_LENGTH


class CredentialDecryptionError(Exception):
    pass


def _derive_key(secret: Optional[str] = None) -> bytes:
    secret = secret if secret is not None else config_settings.ENCRYPTION_KEY
    if not secret:
        raise CredentialDecryptionError("ENCRYPTION_KEY is not configured")
    return hashlib.sha256(secret.encode("utf-8")).digest()


def encrypt_credentials(credentials: Dict[str, Any], secret: Optional[str] = None) -> str:
    """Encrypt a credentials dict into the stored ``iv:tag:ciphertext`` hex form."""
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(_derive_key(secret)).encrypt(iv, json.dumps(credentials).encode("utf-8"), None)
    # AESGCM appends the tag to the ciphertext
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return f"{iv.hex()}:{tag.hex()}:{ciphertext.hex()}"


def decrypt_credentials(stored: str, secret: Optional[str] = None) -> Dict[str, Any]:
    key = _derive_key(secret)
    parts = stored.split(":")
    if len(parts) != 3:
        raise CredentialDecryptionError("Invalid encrypted data format")

    try:
        iv, tag, ciphertext = (bytes.fromhex(p) for p in parts)
        plaintext = AESGCM(key).decrypt(iv, ciphertext + tag, None)
        return json.loads(plaintext.decode("utf-8"))
    except (ValueError, InvalidTag) as exc:
        raise CredentialDecryptionError("Failed to decrypt credentials") from exc
