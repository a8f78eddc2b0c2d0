"""
utils/audit.py — Query Log

Append-only log of reasoning requests with hash chaining. Each entry
links to the previous via SHA-256, so a reviewer can verify that no
computation record was dropped or edited after the fact.

Frameworks are identified by a fingerprint of their canonical apx
rendering rather than stored in full.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

from serialis.argumentation import ArgumentationFramework, write_apx

log = logging.getLogger("serialis.audit")

GENESIS = "genesis"


def framework_fingerprint(af: ArgumentationFramework) -> str:
    return f"sha256:{hashlib.sha256(write_apx(af).encode()).hexdigest()[:16]}"


class QueryLog:
    """Hash-chained JSONL log; one instance per log file."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._previous_hash = self._last_hash()

    def _last_hash(self) -> str:
        entries = self.recent(limit=1)
        if entries:
            return entries[0].get("entry_hash", GENESIS)
        return GENESIS

    def log_query(
        self,
        request_id: str,
        operation: str,
        semantics: str,
        framework_hash: str = "",
        num_arguments: int = 0,
        num_attacks: int = 0,
        num_results: int = 0,
        elapsed_ms: float = 0.0,
        status: str = "ok",
        detail: str = "",
    ) -> dict:
        """
        Record one computation. Returns the log entry dict.
        """
        with self._lock:
            entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": request_id,
                "operation": operation,
                "semantics": semantics,
                "framework_hash": framework_hash,
                "num_arguments": num_arguments,
                "num_attacks": num_attacks,
                "num_results": num_results,
                "elapsed_ms": elapsed_ms,
                "status": status,
                "detail": detail,
                "hash_chain_previous": self._previous_hash,
            }

            entry_bytes = json.dumps(entry, sort_keys=True).encode()
            entry["entry_hash"] = hashlib.sha256(entry_bytes).hexdigest()[:16]
            self._previous_hash = entry["entry_hash"]

            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(self.path, "a") as f:
                    f.write(json.dumps(entry) + "\n")
            except OSError as e:
                log.error(f"Failed to write query log: {e}")

        log.info(
            f"QUERY | {request_id} | {operation} | {semantics} | "
            f"args={num_arguments} results={num_results} "
            f"{elapsed_ms}ms status={status}"
        )
        return entry

    def recent(self, limit: int = 50) -> list[dict]:
        """Most recent entries, newest first; malformed lines are skipped."""
        try:
            if not self.path.exists():
                return []
            lines = self.path.read_text().strip().split("\n")
        except OSError:
            return []

        entries = []
        for line in lines[-limit:] if limit > 0 else []:
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return list(reversed(entries))


def verify_chain(entries: list[dict]) -> bool:
    """Check hash links of entries given oldest first."""
    previous = None
    for entry in entries:
        body = {k: v for k, v in entry.items() if k != "entry_hash"}
        digest = hashlib.sha256(json.dumps(body, sort_keys=True).encode()).hexdigest()[:16]
        if digest != entry.get("entry_hash"):
            return False
        if previous is not None and entry.get("hash_chain_previous") != previous:
            return False
        previous = entry["entry_hash"]
    return True
