import argparse
import sys
from typing import List, Tuple

from ProtocolSearch.config import load_config, resolve_index_path
from ProtocolSearch.preprocessing.document import CATEGORIES, Protocol
from ProtocolSearch.session import SearchSession


def _snippet(text: str, length: int) -> str:
    text = text.replace('\n', ' ')
    if len(text) > length:
        return text[:length] + "..."
    return text


def display_results(results: List[Tuple[Protocol, int]], pdf_path: str, excerpt_length: int = 240):
    """Display search results in a formatted way"""
    if not results:
        print("\nNo matches.")
        return

    print(f"\nSEARCH RESULTS ({len(results)}):")
    print("=" * 60)

    for i, (protocol, score) in enumerate(results):
        print(f"{i+1}. {protocol.title}")
        print(f"   {protocol.category} • pages {protocol.page_range}")
        if protocol.number:
            print(f"   {protocol.number}")
        if score:
            print(f"   Score: {score}")
        print(f"   PDF: {protocol.pdf_link(pdf_path)}")

        excerpt = _snippet(protocol.excerpt, excerpt_length)
        if excerpt:
            print(f"   {excerpt}")

        print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='ProtocolSearch - Search medical protocol titles and excerpts'
    )
    parser.add_argument('--index', help='Path to the protocol index JSON file')
    parser.add_argument('--query', default='', help='Query string to search for')
    parser.add_argument('--category', action='append', choices=CATEGORIES, default=[],
                        help='Only show protocols in this category (repeatable)')
    parser.add_argument('--pdf', help='Base path of the protocols PDF used for page links')
    parser.add_argument('--config', help='Path to a config JSON file')
    parser.add_argument('--interactive', action='store_true',
                        help='Run in interactive mode')
    return parser


def interactive_mode(session: SearchSession, pdf_path: str, excerpt_length: int):
    print("\nProtocolSearch Interactive Mode")
    print("Type 'quit' to exit")

    while True:
        print("\n" + "=" * 60)
        active = ", ".join(sorted(session.active_categories)) or "none"
        print(f"Active filters: {active}")
        print("1. Search")
        print("2. Toggle category filter")
        print("3. Clear filters")
        print("4. Quit")

        choice = input("\nEnter choice (1-4): ")

        if choice == '4' or choice.lower() == 'quit':
            break

        if choice == '1':
            session.set_query(input("\nEnter search terms: "))
            display_results(session.results(), pdf_path, excerpt_length)
            print(session.footer())
        elif choice == '2':
            for i, category in enumerate(CATEGORIES, 1):
                print(f"{i}. {category}")
            selection = input("Category number: ")
            if selection.isdigit() and 1 <= int(selection) <= len(CATEGORIES):
                category = CATEGORIES[int(selection) - 1]
                state = "on" if session.toggle_category(category) else "off"
                print(f"Filter {category}: {state}")
            else:
                print("Invalid category number.")
        elif choice == '3':
            session.clear_categories()
            print("Filters cleared.")
        else:
            print("Invalid choice. Please enter a number between 1 and 4.")


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    index_path = args.index or resolve_index_path(config["index_path"])
    pdf_path = args.pdf or config["pdf_path"]
    excerpt_length = config["display"]["excerpt_length"]

    session = SearchSession()
    session.load(index_path)

    for category in sorted(set(args.category)):
        session.toggle_category(category)

    if args.interactive:
        interactive_mode(session, pdf_path, excerpt_length)
        return 0

    session.set_query(args.query)
    display_results(session.results(), pdf_path, excerpt_length)
    print(session.footer())
    return 0


if __name__ == "__main__":
    sys.exit(main())
