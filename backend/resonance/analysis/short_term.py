"""Mémoire courte : fenêtre glissante des derniers énoncés."""

from collections import Counter, deque
from dataclasses import dataclass, field

from .cooccurrence import CooccurrenceGraph, split_pair


@dataclass
class ShortTermUpdate:
    """Ce qu'un nouvel énoncé a changé dans la fenêtre."""

    delta: dict[str, int] = field(default_factory=dict)  # Variation des totaux par mot
    stability: dict[str, int] = field(default_factory=dict)  # Messages consécutifs contenant le mot
    force_liens: dict[str, float] = field(default_factory=dict)  # cooc / max(freqA, freqB)


class ShortTermMemory:
    """Totaux glissants sur les `limit` derniers énoncés (éviction FIFO).

    Volatile par nature : jamais persistée.
    """

    def __init__(self, limit: int = 10):
        self.limit = limit
        self.messages: deque[tuple[Counter, Counter]] = deque()
        self.total_freq: Counter = Counter()
        self.total_pairs: Counter = Counter()
        self.stability: dict[str, int] = {}
        self.last_tokens: list[str] = []

    def __len__(self) -> int:
        return len(self.messages)

    def _evict_oldest(self) -> None:
        freq, pairs = self.messages.popleft()
        self.total_freq.subtract(freq)
        self.total_pairs.subtract(pairs)
        # Counter.subtract garde les zéros et négatifs
        self.total_freq = +self.total_freq
        self.total_pairs = +self.total_pairs

    def update(self, cooc: CooccurrenceGraph) -> ShortTermUpdate:
        """Ajoute un énoncé à la fenêtre et retourne delta, stabilité et force des liens."""
        previous_totals = Counter(self.total_freq)

        if len(self.messages) >= self.limit:
            self._evict_oldest()

        freq = Counter(cooc.frequencies)
        pairs = Counter(cooc.pairs())
        self.total_freq.update(freq)
        self.total_pairs.update(pairs)
        self.messages.append((freq, pairs))

        delta = {}
        for word in sorted(set(self.total_freq) | set(previous_totals)):
            diff = self.total_freq.get(word, 0) - previous_totals.get(word, 0)
            if diff != 0:
                delta[word] = diff

        previous_tokens = set(self.last_tokens)
        next_stability = {}
        for word in sorted(set(cooc.tokens)):
            streak = self.stability.get(word, 1) if word in previous_tokens else 0
            next_stability[word] = streak + 1

        force_liens = {}
        for key, count in sorted(self.total_pairs.items()):
            a, b = split_pair(key)
            denom = max(self.total_freq.get(a, 1), self.total_freq.get(b, 1))
            force_liens[key] = round(count / denom, 3)

        self.stability = next_stability
        self.last_tokens = list(cooc.tokens)

        return ShortTermUpdate(delta=delta, stability=next_stability, force_liens=force_liens)

    def clear(self) -> None:
        self.messages.clear()
        self.total_freq.clear()
        self.total_pairs.clear()
        self.stability = {}
        self.last_tokens = []
