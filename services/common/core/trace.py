import secrets
import time
from typing import Optional


class TraceId:
    """
    X-Amzn-Trace-Id format:
    Root=1-timestamp-randomuuid;Parent=parentid;Sampled=sampled

    Used only to correlate log lines; the value is never forwarded.
    """

    def __init__(self, root: str, parent: Optional[str] = None, sampled: str = "1"):
        self.root = root
        self.parent = parent
        self.sampled = sampled

    @classmethod
    def generate(cls) -> "TraceId":
        """Generate a new Trace ID (Root=1-timehex-uniqueid)."""
        epoch_hex = f"{int(time.time()):08x}"
        unique_id = secrets.token_hex(12)  # 24 chars
        return cls(root=f"1-{epoch_hex}-{unique_id}", sampled="1")

    @classmethod
    def parse(cls, header: str) -> "TraceId":
        """Parse an X-Amzn-Trace-Id header string."""
        parts = {}
        for part in header.split(";"):
            if "=" in part:
                k, v = part.split("=", 1)
                parts[k.strip()] = v.strip()

        root = parts.get("Root", "")

        # A raw ID without Root= is accepted as the root itself.
        if not root and "-" in header and "=" not in header:
            root = header.strip()

        if not root:
            raise ValueError(f"Trace header has no Root: {header!r}")

        return cls(root=root, parent=parts.get("Parent"), sampled=parts.get("Sampled", "1"))

    def to_root_id(self) -> str:
        """Return only the Root ID."""
        return self.root

    def __str__(self) -> str:
        """Generate the header-formatted string."""
        s = f"Root={self.root}"
        if self.parent:
            s += f";Parent={self.parent}"
        if self.sampled:
            s += f";Sampled={self.sampled}"
        return s
