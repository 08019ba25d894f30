#!/usr/bin/python3
"""A walk through the caseenum features.

Run it to see the sample output, or import it into an interpreter shell to
play with the enums it defines.
"""

import argparse
import logging

from caseenum import *

log = logging.getLogger(__name__)


# A basic enum with no values.  Its members are only equal to themselves.
class CompassPoint (Enum):
    south, west, east, north = __ * 4

    @property
    def opposite(self):
        return {
            CompassPoint.south: CompassPoint.north,
            CompassPoint.north: CompassPoint.south,
            CompassPoint.east: CompassPoint.west,
            CompassPoint.west: CompassPoint.east,
        }[self]


# Leaving out a member without a default is caught when the Switch is built.
heading_message = Switch(CompassPoint, {
    CompassPoint.east: lambda: "Move to east",
}, default=lambda point: "Move any direction other than east")


# Every enum can be iterated and counted.
class Beverage (Enum):
    coffee, juice, tea = __ * 3


def beverages_message():
    return "{} beverages available".format(len(Beverage))


# Members can carry a payload.  Each one is a class of its own, so they can be
# used directly in a match statement.
class Barcode (DataEnum):
    upc = __(int, int, int, int,
             fields=('number_system', 'manufacturer', 'product', 'check'))
    qr_code = __(str, fields=('code',))


def barcode_message(barcode):
    match barcode:
        case Barcode.upc(a, b, c, d):
            return "UPC value: {}-{} {}-{}".format(a, b, c, d)
        case Barcode.qr_code(code):
            return "QRCode: {}".format(code)
        case _:
            raise TypeError("Not a barcode: {!r}".format(barcode))


# The checked version of barcode_message: a Switch gets the payload values as
# handler arguments, and a variant added to Barcode without a branch here is an
# error at import time rather than when the match falls through.
barcode_message_checked = Switch(Barcode, [
    (Barcode.upc, lambda a, b, c, d: "UPC value: {}-{} {}-{}".format(a, b, c, d)),
    (Barcode.qr_code, lambda code: "QRCode: {}".format(code)),
])


# Raw values: every member is also an instance of its basetype.
class ASCIIControlCharacter (CharEnum):
    tab = "\t"
    linefeed = "\n"
    carriage_return = "\r"


# Members without an explicit value count up from the previous one...
class Planet (IntEnum):
    mercury = 1
    venus, earth, mars, jupiter, saturn, uranus, neptune = __ * 7

    @property
    def is_inner(self):
        return self.value <= Planet.mars.value


# ...or, for strings, take their own name.
class Compass (StrEnum):
    north, south, east, west = __ * 4


def planet_message(position):
    planet = Planet.get_value(position)
    if planet is None:
        return "No planet with raw value {}".format(position)
    return "Planet with raw value {}: {}".format(position, planet)


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="log debugging output")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    direction_to_head = CompassPoint.east
    print(heading_message(direction_to_head))

    print(beverages_message())

    product_barcode = Barcode.upc(8, 12345, 67890, 1)
    print(barcode_message(product_barcode))
    product_barcode = Barcode.qr_code("2dstring")
    print(barcode_message(product_barcode))
    print(barcode_message_checked(product_barcode))

    print("Control characters: " + " ".join(
        "{}={!r}".format(c, c.value) for c in ASCIIControlCharacter))
    print("Planet {} is {}".format(Planet.earth.value, Planet.earth))

    south_value = Compass.south.value
    print("Compass.south raw value: {}".format(south_value))

    log.debug("Looking up planets by raw value")
    print(planet_message(7))
    print(planet_message(9))


if __name__ == '__main__':
    main()
