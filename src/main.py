"""
Command-line front end:

1) Load persons (JSON records or a GEDCOM file), family records and the
   relationship dictionary named by the config file or the command line.
2) Build the graph index and the relationship engine.
3) Run one of:
    - relation: kinship term between two persons
    - window: the family window around a focal person (JSON, DOT or image)
    - report: ancestors, descendants or the relationship summary
    - diagram: relationship path diagram between two persons
"""

import argparse
import json
import logging
from pathlib import Path
import sys

from config import Settings, load_settings
from dictionary import load_dictionary
from graph import GraphIndex
from images import ImageProbe
from models import FamilyRecord, Person
from normalization import CodeNormalizer
from parsing import family_from_record, persons_from_records, read_gedcom
from plotting import diagram_to_dot, window_to_dot, write_graph
from relationship import KinshipEngine, expand_code
from reports import ancestors_report, descendants_report, format_report, relationship_summary

logger = logging.getLogger(__name__)


def load_json_records(path: Path) -> list[dict]:
    with Path(path).open(encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of records")
    return data


def load_people(settings: Settings) -> tuple[list[Person], list[FamilyRecord]]:
    if settings.gedcom_file:
        print(f"Parsing GEDCOM file: {settings.gedcom_file}")
        return read_gedcom(settings.gedcom_file)

    if not settings.persons_file:
        raise SystemExit("No persons file or GEDCOM file configured")

    print(f"Loading persons: {settings.persons_file}")
    persons = persons_from_records(load_json_records(settings.persons_file))
    families: list[FamilyRecord] = []
    if settings.families_file:
        print(f"Loading families: {settings.families_file}")
        families = [family_from_record(r) for r in load_json_records(settings.families_file)]
    return persons, families


def build_engine(settings: Settings) -> KinshipEngine:
    persons, families = load_people(settings)
    index = GraphIndex.build(persons, families, max_gender_passes=settings.max_gender_passes)
    print(f"  Index has {len(index)} persons")

    dictionary = load_dictionary(settings.dictionary_file) if settings.dictionary_file else {}
    return KinshipEngine(
        index,
        dictionary,
        language=settings.language,
        default_language=settings.default_language,
        normalizer=CodeNormalizer(settings.normalization_rules),
        max_depth=settings.max_depth,
        home_id=settings.home_person_id,
    )


def cmd_relation(engine: KinshipEngine, args) -> int:
    result = engine.relationship_code(args.source, args.target)
    term = engine.find_relationship(args.source, args.target)
    print(f"Relationship: {term}")
    if result is None:
        print("  No relationship path found")
        return 1
    print(f"  Code: {result.code} ({expand_code(result.code)})")
    names = [engine.index.get_person(pid).name for pid in result.path]
    print(f"  Path: {' -> '.join(names)}")
    return 0


def cmd_window(engine: KinshipEngine, settings: Settings, args) -> int:
    probe = ImageProbe(base_dir=settings.image_base_dir, redraw_delay=settings.redraw_delay)
    try:
        nodes = engine.family_window(args.focal, image_probe=probe)
    finally:
        probe.close()

    if not nodes:
        print(f"Person with ID {args.focal} not found")
        return 1

    output = Path(args.output) if args.output else None
    if output is None or output.suffix.lower() == ".json":
        text = json.dumps([n.as_record() for n in nodes], ensure_ascii=False, indent=2)
        if output is None:
            print(text)
        else:
            output.write_text(text, encoding="utf-8")
            print(f"Window saved to {output}")
    else:
        write_graph(window_to_dot(nodes), output)
    return 0


def cmd_report(engine: KinshipEngine, args) -> int:
    person_id = args.person or engine.home_id
    person = engine.index.get_person(person_id)
    if person is None:
        print("Person not found.")
        return 1

    if args.kind == "ancestors":
        text = format_report(
            f"Ancestors of {person.name} ({person.id})",
            ancestors_report(engine, person_id),
            "No ancestors recorded for this person.",
        )
    elif args.kind == "descendants":
        text = format_report(
            f"Descendants of {person.name} ({person.id})",
            descendants_report(engine, person_id),
            "No descendants recorded for this person.",
        )
    else:
        text = format_report(
            f"Relationship report centered on {person.name} ({person.id})",
            relationship_summary(engine, person_id),
        )
    print(text)
    return 0


def cmd_diagram(engine: KinshipEngine, args) -> int:
    diagram = engine.diagram(args.source, args.target)
    if diagram is None:
        print("No direct relationship path found.")
        return 1
    target = engine.index.get_person(args.target)
    print(f"{target.name} is your {diagram.term} (code {diagram.code})")
    write_graph(diagram_to_dot(engine.index, diagram), Path(args.output) if args.output else None)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vamsha", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--config", type=Path, help="JSON config file")
    parser.add_argument("--persons", type=Path, help="persons JSON (overrides config)")
    parser.add_argument("--families", type=Path, help="families JSON (overrides config)")
    parser.add_argument("--gedcom", type=Path, help="GEDCOM file instead of JSON records")
    parser.add_argument("--dictionary", type=Path, help="relationship dictionary JSON")
    parser.add_argument("--language", help="term language, e.g. en, kn, te")
    parser.add_argument("--home", help="home person id")
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="command", required=True)

    relation = sub.add_parser("relation", help="kinship term between two persons")
    relation.add_argument("source")
    relation.add_argument("target")

    window = sub.add_parser("window", help="family window around a focal person")
    window.add_argument("focal")
    window.add_argument("-o", "--output", help=".json, .dot, .png, .svg or .pdf")

    report = sub.add_parser("report", help="ancestors, descendants or relationship summary")
    report.add_argument("kind", choices=["ancestors", "descendants", "summary"])
    report.add_argument("person", nargs="?", help="defaults to the home person")

    diagram = sub.add_parser("diagram", help="relationship path diagram")
    diagram.add_argument("source")
    diagram.add_argument("target")
    diagram.add_argument("-o", "--output", help=".dot, .png, .svg or .pdf")

    return parser


def apply_overrides(settings: Settings, args) -> Settings:
    if args.persons:
        settings.persons_file = args.persons
    if args.families:
        settings.families_file = args.families
    if args.gedcom:
        settings.gedcom_file = args.gedcom
    if args.dictionary:
        settings.dictionary_file = args.dictionary
    if args.language:
        settings.language = args.language
    if args.home:
        settings.home_person_id = args.home
    return settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = apply_overrides(load_settings(args.config), args)
    engine = build_engine(settings)
    logger.debug("Language %s (default %s)", settings.language, settings.default_language)

    if args.command == "relation":
        return cmd_relation(engine, args)
    if args.command == "window":
        return cmd_window(engine, settings, args)
    if args.command == "report":
        return cmd_report(engine, args)
    return cmd_diagram(engine, args)


if __name__ == "__main__":
    sys.exit(main())
