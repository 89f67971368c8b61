"""Deterministic display color for a participant name."""

# Tailwind 500/600/700 shades, in display order.
PALETTE: tuple[str, ...] = (
    "#ef4444",  # red-500
    "#3b82f6",  # blue-500
    "#10b981",  # emerald-500
    "#f59e0b",  # amber-500
    "#8b5cf6",  # violet-500
    "#ec4899",  # pink-500
    "#06b6d4",  # cyan-500
    "#f97316",  # orange-500
    "#6366f1",  # indigo-500
    "#84cc16",  # lime-500
    "#14b8a6",  # teal-500
    "#d946ef",  # fuchsia-500
    "#e11d48",  # rose-600
    "#0ea5e9",  # sky-500
    "#22c55e",  # green-500
    "#eab308",  # yellow-500
    "#a855f7",  # purple-500
    "#f43f5e",  # rose-500
    "#64748b",  # slate-500
    "#78716c",  # stone-500
    "#b91c1c",  # red-700
    "#15803d",  # green-700
    "#1d4ed8",  # blue-700
    "#7e22ce",  # purple-700
    "#be123c",  # rose-700
)


def name_hash(name: str) -> int:
    """Signed 32-bit ``h * 31 + ord(c)`` string hash."""
    h = 0
    for ch in name:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    return h - (1 << 32) if h & 0x80000000 else h


def palette_index(name: str) -> int:
    return abs(name_hash(name)) % len(PALETTE)


def participant_color(name: str) -> str:
    return PALETTE[palette_index(name)]
