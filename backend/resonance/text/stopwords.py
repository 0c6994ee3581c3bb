"""Mots vides français.

Les entrées sont stockées sans accents : la comparaison se fait après
normalisation du token (minuscules, diacritiques retirés).
"""

FRENCH_STOPWORDS = frozenset({
    # Articles et déterminants
    "le", "la", "les", "un", "une", "des", "du", "de", "au", "aux",
    "ce", "cet", "cette", "ces", "ca", "cela", "ceux", "chaque",
    # Pronoms
    "je", "tu", "il", "elle", "on", "nous", "vous", "ils", "elles",
    "me", "te", "se", "moi", "toi", "lui", "eux", "en", "y",
    "qui", "que", "quoi", "dont", "ou", "quand", "comment", "pourquoi",
    "quel", "quelle", "quels", "quelles",
    # Possessifs
    "mon", "ma", "mes", "ton", "ta", "tes", "son", "sa", "ses",
    "notre", "nos", "votre", "vos", "leur", "leurs", "sien",
    # Prépositions et conjonctions
    "et", "mais", "donc", "or", "ni", "car", "si", "ne", "pas",
    "dans", "sur", "sous", "avec", "sans", "pour", "par", "contre",
    "entre", "vers", "chez", "depuis", "avant", "hors", "dedans", "dehors",
    "comme", "parce", "tandis", "alors", "puis",
    # Adverbes très courants
    "plus", "moins", "tres", "trop", "peu", "aussi", "encore", "ici",
    "juste", "seulement", "tellement", "maintenant", "meme",
    # Auxiliaires et verbes vides
    "est", "es", "suis", "sont", "etre", "ete", "etaient", "etions", "etat",
    "ai", "as", "a", "avons", "avez", "ont", "avoir", "eu",
    "fait", "faire", "faites", "font", "vont", "peut", "devrait", "soyez",
    # Quantificateurs
    "tout", "toute", "tous", "toutes", "aucun", "autre", "tels", "plupart",
    # Fragments d'élision après normalisation
    "aujourd", "hui", "cest", "qu", "jai", "quil", "nest",
})
