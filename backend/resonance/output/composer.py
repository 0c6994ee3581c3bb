"""Composition de l'écho : phrase, métaphore et question ouverte.

Fonction de mise en forme pure. Le seul aléa (choix de la structure, de la
métaphore et de la question) passe par un `random.Random` injecté, pour que
les tests puissent fixer la graine.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import json
import logging
import random

from ..config import VALID_MODES
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

PATTERN_KEYS = ("metaphors", "openQuestions", "sentenceStructures")

DEFAULT_PATTERNS: dict[str, dict[str, list[str]]] = {
    "neutral": {
        "metaphors": ["comme une onde qui se propage"],
        "openQuestions": ["Que signifie cela pour vous ?"],
        "sentenceStructures": ["Le cœur : {pivot}. Résonances : {cowords}."],
    },
}

ANALOGIES = [
    ("comme un tambour trop serré sous les côtes", "tension"),
    ("comme une voile qui cherche le vent", "élan"),
    ("comme une braise qui ne veut pas s'éteindre", "endurance"),
    ("comme une corde sensible qui vibre en silence", "sensibilité"),
    ("comme un phare pris dans la brume", "brouillard"),
    ("comme un galet sous la surface calme", "poids"),
    ("comme un ressort qui attend de se détendre", "libération"),
]

QUESTION_TEMPLATES = [
    'Que veut protéger "{pivot}" en toi ? fugue, bataille ou appel ?',
    'Si "{pivot}" parlait, demanderait-il de tenir, de crier ou de souffler ?',
    "Qu'est-ce qui pulse derrière \"{pivot}\" : un besoin, une limite, un signal ?",
    'Quel geste simple pourrait apprivoiser "{pivot}" dans l\'instant ?',
]


@dataclass
class Echo:
    """Écho rendu pour une analyse."""

    echo: str
    metaphor: str
    question: str
    mode: str

    def to_dict(self) -> dict:
        return {"echo": self.echo, "metaphor": self.metaphor, "question": self.question, "mode": self.mode}


def validate_patterns(data) -> dict[str, dict[str, list[str]]]:
    """Vérifie la structure {mode: {clé: [chaînes]}}.

    Les entrées non textuelles sont ignorées ; une structure inutilisable
    (pas d'objet, aucun mode exploitable) lève ConfigurationError.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("les patterns doivent être un objet JSON")

    patterns: dict[str, dict[str, list[str]]] = {}
    for mode, entries in data.items():
        if mode not in VALID_MODES or not isinstance(entries, dict):
            logger.warning(f"Patterns ignorés pour le mode {mode!r}")
            continue
        cleaned = {}
        for key in PATTERN_KEYS:
            values = entries.get(key) or []
            if isinstance(values, list):
                cleaned[key] = [v for v in values if isinstance(v, str) and v.strip()]
        patterns[mode] = cleaned

    if not patterns:
        raise ConfigurationError("aucun mode de patterns exploitable")
    return patterns


def render_template(template: str, values: dict[str, str]) -> str:
    """Remplace {clé} et {{clé}} par leur valeur."""
    rendered = template
    for key, value in values.items():
        rendered = rendered.replace("{{" + key + "}}", value)
        rendered = rendered.replace("{" + key + "}", value)
    return rendered


class EchoComposer:
    """Rend un écho à partir de pivot, noyau et périphérie."""

    def __init__(
        self,
        patterns: Optional[dict] = None,
        rng: Optional[random.Random] = None,
    ):
        if patterns is None:
            self.patterns = DEFAULT_PATTERNS
        else:
            try:
                self.patterns = validate_patterns(patterns)
            except ConfigurationError as e:
                logger.warning(f"Patterns invalides ({e}), patterns par défaut utilisés")
                self.patterns = DEFAULT_PATTERNS
        self.rng = rng or random.Random()

    @classmethod
    def from_file(cls, path: Optional[str | Path], rng: Optional[random.Random] = None) -> "EchoComposer":
        """Charge les patterns depuis un fichier JSON, défauts si absent ou malformé."""
        if path is None:
            return cls(rng=rng)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Patterns {path} introuvables ou illisibles ({e}), défauts utilisés")
            return cls(rng=rng)
        return cls(patterns=data, rng=rng)

    def _choices(self, mode: str, key: str) -> list[str]:
        """Liste du mode, sinon celle de neutral, sinon celle par défaut."""
        for source in (self.patterns.get(mode), self.patterns.get("neutral"), DEFAULT_PATTERNS["neutral"]):
            if source and source.get(key):
                return source[key]
        return DEFAULT_PATTERNS["neutral"][key]

    def compose(
        self,
        pivot: Optional[str],
        noyau: list[str],
        peripherie: list[str],
        mode: Optional[str] = None,
    ) -> Echo:
        """Choisit une structure, une métaphore et une question, puis remplit les placeholders."""
        if mode not in VALID_MODES:
            mode = "neutral"

        structure = self.rng.choice(self._choices(mode, "sentenceStructures"))
        metaphor = self.rng.choice(self._choices(mode, "metaphors"))
        question = self.rng.choice(self._choices(mode, "openQuestions"))

        pivot_text = pivot or "essence"
        cowords = ", ".join(noyau[:3]) or (peripherie[0] if peripherie else "essence")
        noyau_text = ", ".join(noyau) if noyau else pivot_text
        peripherie_text = ", ".join(peripherie) if peripherie else cowords

        values = {
            "pivot": pivot_text,
            "cowords": cowords,
            "noyau": noyau_text,
            "peripherie": peripherie_text,
            "periphérie": peripherie_text,
        }
        # Métaphore et question peuvent elles-mêmes contenir des placeholders
        values["meta"] = render_template(metaphor, values)
        values["question"] = render_template(question, values)
        return Echo(
            echo=render_template(structure, values),
            metaphor=values["meta"],
            question=values["question"],
            mode=mode,
        )


def build_metaphore(pivot: Optional[str], noyau: list[str]) -> str:
    """Métaphore déterministe : l'analogie dépend de la somme des points de code du pivot."""
    index = sum(ord(ch) for ch in pivot) % len(ANALOGIES) if pivot else 0
    frame, _ = ANALOGIES[index]
    neighbor = noyau[0] if noyau else "toi"
    return f"{frame}, {pivot or 'mot'} touche {neighbor}."


def pick_question(pivot: Optional[str]) -> str:
    """Question de rebond déterministe pour un pivot."""
    safe_pivot = pivot or "ce point"
    index = (len(safe_pivot) + ord(safe_pivot[0])) % len(QUESTION_TEMPLATES)
    return QUESTION_TEMPLATES[index].replace("{pivot}", safe_pivot)


def build_suggestions(pivot: Optional[str], noyau: list[str], peripherie: list[str]) -> list[str]:
    """Trois invitations poétiques construites sur les premiers termes."""
    seed = [t for t in [pivot, *noyau, *peripherie] if t]
    first = seed[0] if len(seed) > 0 else "mot"
    second = seed[1] if len(seed) > 1 else "souffle"
    third = seed[2] if len(seed) > 2 else "trajet"
    return [
        f"pose une main sur {first}",
        f"laisse {second} desserrer le cadre",
        f"écoute le pas de {third}",
    ]
