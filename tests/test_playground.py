import pytest

from caseenum import NonExhaustiveError, Switch
from playground import (ASCIIControlCharacter, Barcode, Beverage, Compass,
                        CompassPoint, Planet, barcode_message,
                        barcode_message_checked, beverages_message,
                        heading_message, main, planet_message)


def test_heading():
    assert heading_message(CompassPoint.east) == "Move to east"
    for point in (CompassPoint.south, CompassPoint.west, CompassPoint.north):
        assert heading_message(point) == "Move any direction other than east"


def test_heading_without_default_is_rejected():
    with pytest.raises(NonExhaustiveError) as excinfo:
        Switch(CompassPoint, {CompassPoint.east: lambda: "Move to east"})
    assert CompassPoint.north in excinfo.value.missing


def test_opposite():
    for point in CompassPoint:
        assert point.opposite.opposite is point
    assert CompassPoint.east.opposite is CompassPoint.west


@pytest.mark.parametrize("enum_class", [
    CompassPoint, Beverage, ASCIIControlCharacter, Planet, Compass])
def test_members_display_their_declared_name(enum_class):
    for member in enum_class:
        assert str(member) == member.name
        assert getattr(enum_class, str(member)) is member


def test_beverage_count():
    assert len(Beverage) == 3
    assert list(Beverage) == [Beverage.coffee, Beverage.juice, Beverage.tea]
    assert beverages_message() == "3 beverages available"


def test_upc_payload_round_trips():
    barcode = Barcode.upc(8, 12345, 67890, 1)
    match barcode:
        case Barcode.upc(a, b, c, d):
            assert (a, b, c, d) == (8, 12345, 67890, 1)
        case _:
            pytest.fail("upc branch not taken")
    assert barcode.manufacturer == 12345
    assert barcode_message(barcode) == "UPC value: 8-12345 67890-1"
    assert barcode_message_checked(barcode) == "UPC value: 8-12345 67890-1"


def test_qr_code_selects_text_branch():
    barcode = Barcode.qr_code("2dstring")
    match barcode:
        case Barcode.upc():
            pytest.fail("upc branch taken for a qr code")
        case Barcode.qr_code(code):
            assert code == "2dstring"
    assert barcode_message(barcode) == "QRCode: 2dstring"
    assert barcode_message_checked(barcode) == "QRCode: 2dstring"


def test_barcode_message_rejects_other_values():
    with pytest.raises(TypeError):
        barcode_message("2dstring")


def test_control_characters():
    assert ASCIIControlCharacter.tab.value == "\t"
    assert ASCIIControlCharacter.linefeed.value == "\n"
    assert ASCIIControlCharacter.carriage_return.value == "\r"
    assert ASCIIControlCharacter.get_value("\n") is ASCIIControlCharacter.linefeed
    assert ASCIIControlCharacter.get_value("\v") is None


def test_planet_raw_values_count_from_one():
    planets = list(Planet)
    assert len(planets) == 8
    for n, planet in enumerate(planets, 1):
        assert planet.value == n
    assert Planet.venus.value == 2
    assert Planet.neptune.value == 8


def test_planet_reverse_lookup():
    assert Planet.get_value(7) is Planet.uranus
    assert Planet.get_value(0) is None
    assert Planet.get_value(9) is None
    assert planet_message(7) == "Planet with raw value 7: uranus"
    assert planet_message(9) == "No planet with raw value 9"


def test_inner_planets():
    assert [p for p in Planet if p.is_inner] == [
        Planet.mercury, Planet.venus, Planet.earth, Planet.mars]


def test_compass_raw_value_is_the_name():
    for point in Compass:
        assert point.value == point.name
    assert Compass.south.value == "south"
    assert Compass.get_value("up") is None


def test_help_describes_the_playground(capsys):
    with pytest.raises(SystemExit):
        main(['--help'])
    assert "A walk through the caseenum features." in capsys.readouterr().out


def test_main_output(capsys):
    main([])
    out = capsys.readouterr().out
    assert out.splitlines() == [
        "Move to east",
        "3 beverages available",
        "UPC value: 8-12345 67890-1",
        "QRCode: 2dstring",
        "QRCode: 2dstring",
        "Control characters: tab='\\t' linefeed='\\n' carriage_return='\\r'",
        "Planet 3 is earth",
        "Compass.south raw value: south",
        "Planet with raw value 7: uranus",
        "No planet with raw value 9",
    ]
