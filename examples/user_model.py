"""User model: annotated Swift properties analysed for code generation.

Reads the properties of a small Swift model, builds a Variable for each
non-private one and prints what a template would see.
"""

import logging

from declscan.analysis import build_variables, read_declarations

SOURCE = """
// sourcery: primaryKey
public let id: UUID

/// Display name shown in the profile header.
// sourcery: jsonKey = "display_name"
public var name = String()

// sourcery: skipEquality
// sourcery: maxCount = 20
public private(set) var tags = ["swift", "codegen"]

public var scores = [1: 0.5, 2: nil]

public var isAdult: Bool { return age >= 18 }

var age = 0 {
    didSet { updated = true }
}

private var updated = false

var location = (lat: 0.0, lon: 0.0)

var formatter = Formatter.shared
"""


def main() -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    for var in build_variables(read_declarations(SOURCE)):
        access = f"{var.access_level.read.value}/{var.access_level.write.value}"
        kind = "computed" if var.is_computed else "stored"
        print(f"{var.name:<10} {var.type_name.name:<24} {access:<18} {kind:<9} {var.annotation_values}")


if __name__ == "__main__":
    main()
