import sys

import dxfread


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("usage: python examples/hatch_areas.py DRAWING.dxf")
    path = sys.argv[1]
    doc = dxfread.read(path)

    hatches = doc.entities_of_type(dxfread.Hatch)
    print(f"version: {doc.version}")
    print(f"HATCH count: {len(hatches)}")
    for hatch in hatches:
        fill = "solid" if hatch.has_solid_fill else hatch.pattern_name
        print(f"{hatch.handle} layer={hatch.layer} fill={fill} area={hatch.area:.3f}")

    total = sum(polyline.length for polyline in doc.entities_of_type(dxfread.LwPolyline))
    print(f"LWPOLYLINE total length: {total:.3f}")


if __name__ == "__main__":
    main()
