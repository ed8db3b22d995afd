import json

from breedarchitect.elements.entity import Sex
from breedarchitect.io import (
    layers_to_dict,
    load_calculator,
    parse_overrides,
    parse_species,
    read_table,
    write_json,
)


def _write(path, text):
    path.write_text(text)
    return str(path)


def _tables(tmp_path):
    species = _write(
        tmp_path / "species.csv",
        "id,code,name,breed_value,index_order\n"
        "1,001,A,0,0\n"
        "2,002,B,10,1\n"
        "\n"
        "3,003,C,20,2\n",
    )
    traits = _write(
        tmp_path / "passives.csv",
        "id,code,name\n1,p1,x\n2,p2,y\n",
    )
    overrides = _write(
        tmp_path / "special.csv",
        "id,parent_a,a_code,parent_b,b_code,child\n1,A,001,B,002,C\n",
    )
    return species, traits, overrides


def test_parse_species_by_position(tmp_path):
    species_path, _, _ = _tables(tmp_path)
    species = parse_species(read_table(species_path))
    assert [s.name for s in species] == ["A", "B", "C"]
    assert [s.breed_rank for s in species] == [0, 10, 20]
    assert species[2].tie_order == 2
    assert species[2].species_id == 3


def test_parse_overrides_by_position(tmp_path):
    _, _, overrides_path = _tables(tmp_path)
    assert parse_overrides(read_table(overrides_path)) == [("A", "B", "C")]


def test_load_calculator_end_to_end(tmp_path):
    calculator = load_calculator(*_tables(tmp_path))
    a = calculator.make_entity("A", Sex.MALE, ["x"])
    b = calculator.make_entity("B", Sex.FEMALE)
    assert calculator.combine(a, b).species.name == "C"

    tree = calculator.calc_tree([a, b], calculator.resolve_species("C"))
    layers = calculator.pair_tree(tree)
    data = layers_to_dict(layers)

    assert data[0][0]["child"]["species"] == "C"
    assert data[0][0]["child"]["traits"] == ["x"]
    assert data[0][0]["father"]["sex"] == "male"
    assert data[0][0]["father"]["leaf"] is True

    out = tmp_path / "tree.json"
    write_json(layers, str(out))
    assert json.loads(out.read_text()) == data


def test_load_calculator_without_overrides(tmp_path):
    species_path, traits_path, _ = _tables(tmp_path)
    calculator = load_calculator(species_path, traits_path)
    a = calculator.resolve_species("A")
    b = calculator.resolve_species("B")
    assert calculator.table.child(a, b).name == "A"
