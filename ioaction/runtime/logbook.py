"""Signed provenance logbook of action runs."""
from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from ..constants import KEY_FILE, LOGBOOK_FILE, LOGBOOK_LIMIT, PUB_FILE
from .analysis import hash_action
from .core import Action
from .engine import Outcome

_PSS = padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=padding.PSS.MAX_LENGTH)


def ensure_keypair(key_file=KEY_FILE, pub_file=PUB_FILE):
    """Load the RSA signing key, creating a keypair on first use."""
    key_path = Path(key_file)
    try:
        private_key = serialization.load_pem_private_key(
            key_path.read_bytes(), password=None
        )
    except FileNotFoundError:
        print("🔐 Generating new ioaction RSA keypair ...")
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        key_path.write_bytes(
            private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        )
        Path(pub_file).write_bytes(
            private_key.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        )
        print(f"  ✓ Keys written to {key_file}, {pub_file}")
    return private_key


def sign_hash(sha256_hex, key_file=KEY_FILE, pub_file=PUB_FILE):
    private_key = ensure_keypair(key_file, pub_file)
    return private_key.sign(sha256_hex.encode(), _PSS, hashes.SHA256()).hex()


def verify_signature(sha256_hex, signature_hex, pub_file=PUB_FILE):
    public_key = serialization.load_pem_public_key(Path(pub_file).read_bytes())
    try:
        public_key.verify(
            bytes.fromhex(signature_hex), sha256_hex.encode(), _PSS, hashes.SHA256()
        )
    except (InvalidSignature, ValueError):
        return False
    return True


def record_run(
    program: str,
    action: Action,
    outcome: Outcome,
    *,
    logbook_path=LOGBOOK_FILE,
    key_file=KEY_FILE,
    pub_file=PUB_FILE,
):
    """Append this run's metadata to the logbook, signed."""
    sha = hash_action(action)
    if outcome.cancelled:
        status = "cancelled"
    elif outcome.error is not None:
        status = type(outcome.error).__name__
    else:
        status = "ok"

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "program": program,
        "hash": sha,
        "signature": sign_hash(sha, key_file, pub_file),
        "status": status,
        "grade": outcome.grade,
        "log_length": outcome.effect_count,
        "first_log": outcome.first_log,
        "last_log": outcome.log[-1] if outcome.log else None,
    }

    with open(logbook_path, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry) + "\n")

    print(f"  📜 Recorded and signed run → {logbook_path}")
    return entry


def load_logbook(logbook_path=LOGBOOK_FILE, limit=LOGBOOK_LIMIT):
    try:
        with open(logbook_path, "r", encoding="utf-8") as f:
            lines = [line for line in f if line.strip()]
    except FileNotFoundError:
        return []
    return [json.loads(line) for line in lines[-limit:]]


def show_logbook(logbook_path=LOGBOOK_FILE, limit=LOGBOOK_LIMIT):
    """Display recent logbook entries, newest first."""
    entries = load_logbook(logbook_path, limit)
    if not entries:
        print("No logbook yet.")
        return
    print(f"\nioaction logbook — last {len(entries)} entries:")
    for e in reversed(entries):
        print(
            f"• {e['timestamp']}  {e['program']}  [{e['grade']}/{e['status']}]  {e['hash'][:12]}…"
        )
        if e["first_log"] and e["last_log"]:
            print(f"    log: {e['first_log']} → {e['last_log']}")


__all__ = [
    "ensure_keypair",
    "load_logbook",
    "record_run",
    "show_logbook",
    "sign_hash",
    "verify_signature",
]
