from stashmap.species import SPECIES_DELTA_BASE, SPECIES_DELTAS, SpeciesNames, SpeciesResolver


def test_delta_table_shape():
    assert SPECIES_DELTA_BASE == 917
    assert len(SPECIES_DELTAS) == 109
    assert SPECIES_DELTAS[3] == -1


def test_resolve_inside_window():
    resolver = SpeciesResolver()
    assert resolver.resolve(920) == 920 + SPECIES_DELTAS[3] == 919
    assert resolver.resolve(917) == 982
    assert resolver.resolve(917 + 108) == 917 + 108 - 12


def test_resolve_is_identity_outside_window():
    resolver = SpeciesResolver()
    for ordinal in list(range(0, 917)) + list(range(917 + 109, 1200)) + [0xFFFF]:
        assert resolver.resolve(ordinal) == ordinal


def test_custom_table():
    resolver = SpeciesResolver(base=10, deltas=(5, -5))
    assert resolver.resolve(9) == 9
    assert resolver.resolve(10) == 15
    assert resolver.resolve(11) == 6
    assert resolver.resolve(12) == 12


def test_names_from_text():
    names = SpeciesNames.from_text("Egg\nBulbasaur\r\nIvysaur\n")
    assert len(names) == 3
    assert names.name(1) == "Bulbasaur"
    assert names.name(2) == "Ivysaur"


def test_names_without_trailing_newline():
    names = SpeciesNames.from_text("Egg\nBulbasaur")
    assert len(names) == 2
    assert SpeciesNames.from_text("").names == []


def test_unknown_name_falls_back_to_number():
    names = SpeciesNames(["Egg"])
    assert names.name(25) == "Species #25"


def test_load_missing_file(tmp_path):
    names = SpeciesNames.load(str(tmp_path / "nope.txt"))
    assert len(names) == 0


def test_load_file(tmp_path):
    path = tmp_path / "species_en.txt"
    path.write_text("Egg\nBulbasaur\n", encoding="utf-8")
    assert SpeciesNames.load(str(path)).name(1) == "Bulbasaur"


def test_load_file_with_invalid_utf8(tmp_path):
    path = tmp_path / "species_en.txt"
    path.write_bytes(b"Egg\nBulbasaur\nFlab\xe9b\xe9\nIvysaur\n")
    names = SpeciesNames.load(str(path))
    assert len(names) == 4
    assert names.name(1) == "Bulbasaur"
    assert names.name(2) == "Flab�b�"
    assert names.name(3) == "Ivysaur"
