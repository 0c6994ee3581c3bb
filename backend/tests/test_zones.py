# Tests zonage noyau / périphérie

from resonance.analysis import build_cooccurrence_graph, classify_by_adjacency, classify_by_frequency, classify_zones


class TestAdjacency:
    """Politique par défaut : voisins du pivot."""

    def test_neighbours_become_noyau(self):
        cooc = build_cooccurrence_graph(["cherche", "sens", "monde"])
        assert classify_by_adjacency("cherche", cooc) == (["monde", "sens"], [])

    def test_noyau_bounded_and_rest_is_peripherie(self):
        tokens = ["a", "p", "b", "p", "c", "p", "d", "p", "e", "x", "y"]
        cooc = build_cooccurrence_graph(tokens, window_size=1)
        noyau, peripherie = classify_by_adjacency("p", cooc, noyau_size=4)
        assert noyau == ["b", "c", "d", "a"]
        assert peripherie == ["e", "x", "y"]

    def test_strongest_links_first(self):
        tokens = ["vent", "mer", "vent", "mer", "sel"]
        cooc = build_cooccurrence_graph(tokens, window_size=1)
        noyau, _ = classify_by_adjacency("mer", cooc, noyau_size=1)
        assert noyau == ["vent"]


class TestFrequency:
    """Politique par percentile de fréquence."""

    def test_top_ratio_excluding_pivot(self):
        tokens = ["pivot", "a", "a", "a", "b", "b", "c", "d"]
        cooc = build_cooccurrence_graph(tokens)
        noyau, peripherie = classify_by_frequency("pivot", cooc, noyau_ratio=0.5)
        assert noyau == ["a", "b"]
        assert peripherie == ["c", "d"]

    def test_at_least_one_term(self):
        cooc = build_cooccurrence_graph(["pivot", "a", "b", "c"])
        noyau, _ = classify_by_frequency("pivot", cooc, noyau_ratio=0.01)
        assert len(noyau) == 1

    def test_only_pivot(self):
        cooc = build_cooccurrence_graph(["pivot"])
        assert classify_by_frequency("pivot", cooc) == ([], [])


class TestClassifyZones:
    """Invariants communs aux politiques."""

    def test_no_pivot(self):
        cooc = build_cooccurrence_graph([])
        assert classify_zones(None, cooc) == ([], [])

    def test_zones_are_disjoint_and_exclude_pivot(self):
        tokens = ["mer", "vent", "sel", "mer", "nuit", "lune", "mer", "ciel"]
        cooc = build_cooccurrence_graph(tokens)
        for policy in ("adjacency", "frequency"):
            noyau, peripherie = classify_zones("mer", cooc, policy=policy)
            assert "mer" not in noyau
            assert "mer" not in peripherie
            assert not set(noyau) & set(peripherie)
            assert set(noyau) | set(peripherie) | {"mer"} == set(cooc.frequencies)
