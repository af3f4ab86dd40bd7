# ecodviz/cli/main.py
import argparse
import json
import sys
import logging
from typing import List, Optional

from ecodviz.core.context import ApplicationContext
from ecodviz.core.logging_config import LoggingManager
from ecodviz.error_handlers import cli_error_handler
from ecodviz.exceptions import ValidationError
from ecodviz.models.domain import DomainDescriptor, domain_chain
from ecodviz.structure.loader import LoadedStructure, validate_pdb_id
from ecodviz.structure.session import SessionManager, ViewerSession
from ecodviz.structure.styler import DomainStyler


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ecodviz',
        description='Map ECOD domains onto protein structures and render them'
    )

    # Global options
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times)')
    parser.add_argument('--log-file', type=str,
                        help='Log to file in addition to stdout')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Options shared by map and render
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('pdb_id', type=str, help='PDB ID of the structure')
    common.add_argument('--chain', type=str,
                        help='Chain to display (default: chain of the domains, else the largest protein chain)')
    common.add_argument('--domain', dest='domains', action='append', default=[],
                        metavar='ID:START-END[:CHAIN]',
                        help='Domain to map, in sequence numbering (repeatable)')
    common.add_argument('--from-db', action='store_true',
                        help='Read the domains of the entry from the ECOD database')
    common.add_argument('--structure-file', type=str,
                        help='Read the structure from this file instead of the PDB mirror or RCSB')
    common.add_argument('--require-protein', action='store_true',
                        help='Fall back to the largest protein chain if the requested chain is not protein')
    common.add_argument('--report', type=str, help='Write a per-domain mapping report (TSV)')
    common.add_argument('--json', action='store_true', help='Output results as JSON')

    subparsers.add_parser('map', parents=[common],
                          help='Analyze a structure and map domain ranges onto it')

    render_parser = subparsers.add_parser('render', parents=[common],
                                          help='Map domains and write a styled view')
    render_parser.add_argument('--html', type=str, help='Write an interactive 3Dmol.js page')
    render_parser.add_argument('--pymol', type=str, help='Write a PyMOL script (.pml)')
    render_parser.add_argument('--save-session', action='store_true',
                               help='Make the PyMOL script save a .pse session')
    render_parser.add_argument('--domain-map', type=str,
                               help='Write a domain architecture figure (PNG/SVG/PDF)')
    render_parser.add_argument('--highlight', type=str,
                               help='Domain ID to highlight instead of showing all domains equally')

    return parser


def collect_domains(context: ApplicationContext, args: argparse.Namespace,
                    pdb_id: str) -> List[DomainDescriptor]:
    """Domains from --domain specs followed by database domains"""
    domains = [DomainDescriptor.from_spec(spec, index) for index, spec in enumerate(args.domains)]
    if args.from_db:
        repository = context.domain_repository()
        domains.extend(repository.get_domains_for_chain(pdb_id, args.chain))
    return domains


def load_structure(context: ApplicationContext, args: argparse.Namespace) -> LoadedStructure:
    loader = context.structure_loader()
    if args.structure_file:
        return loader.load_file(args.structure_file, args.pdb_id)
    return loader.load(args.pdb_id)


def build_session(context: ApplicationContext, args: argparse.Namespace,
                  logger: logging.Logger) -> ViewerSession:
    pdb_id = validate_pdb_id(args.pdb_id)
    domains = collect_domains(context, args, pdb_id)
    loaded = load_structure(context, args)

    requested_chain = args.chain or domain_chain(domains)
    manager = SessionManager(context.analyzer(), context.style_options())
    session = manager.load(loaded, domains, requested_chain, args.require_protein)
    if session is None:
        raise ValidationError(f"Load of {pdb_id} was superseded")

    for warning in session.structure_info.warnings:
        logger.warning(warning.message)
    return session


def print_result(session: ViewerSession, args: argparse.Namespace,
                 outputs: Optional[dict] = None) -> None:
    result = session.last_result
    if args.json:
        print(json.dumps({
            'pdb_id': session.loaded.pdb_id,
            'structure': session.structure_info.to_dict(),
            'styling': result.to_dict(),
            'outputs': outputs or {},
        }, indent=2))
        return

    info = session.structure_info
    print(f"{session.loaded.pdb_id} chain {info.actual_chain} ({info.chain_type}, "
          f"residues {info.min_residue}-{info.max_residue})")
    for warning in info.warnings:
        print(f"Warning: {warning.message}")
    for outcome in result.outcomes:
        mapped = outcome.mapped.range_str if outcome.mapped else '-'
        print(f"  {outcome.domain.display_label}: {outcome.domain.sequence_range} -> "
              f"{outcome.chain}:{mapped} [{outcome.status}]")
    print(result.summary())
    for name, path in (outputs or {}).items():
        print(f"Wrote {name}: {path}")


def write_report_output(session: ViewerSession, path: str) -> str:
    from ecodviz.structure.report import mapping_report, write_report
    return write_report(mapping_report(session.last_result), path)


def run_map(context: ApplicationContext, args: argparse.Namespace, logger: logging.Logger) -> int:
    session = build_session(context, args, logger)
    try:
        outputs = {}
        if args.report:
            outputs['report'] = write_report_output(session, args.report)
        print_result(session, args, outputs)
    finally:
        session.close()
    return 0


def run_render(context: ApplicationContext, args: argparse.Namespace, logger: logging.Logger) -> int:
    if not (args.html or args.pymol or args.domain_map or args.report):
        raise ValidationError("render needs at least one of --html, --pymol, --domain-map, --report")

    session = build_session(context, args, logger)
    try:
        if args.highlight:
            if session.highlight_domain_id(args.highlight) is None:
                logger.warning(f"Domain {args.highlight} could not be highlighted")

        outputs = {}
        if args.report:
            outputs['report'] = write_report_output(session, args.report)

        if args.pymol:
            from ecodviz.structure.pymol_export import write_pymol_script
            structure_path = session.loaded.path or f"{session.loaded.pdb_id}.cif"
            if session.loaded.path is None:
                logger.info(f"Structure was downloaded; script will load {structure_path}")
            outputs['pymol'] = write_pymol_script(session.viewer, structure_path, args.pymol,
                                                  session.loaded.pdb_id, session.last_result,
                                                  args.save_session)

        if args.domain_map:
            from ecodviz.structure.report import plot_domain_map
            outputs['domain_map'] = plot_domain_map(session.structure_info, session.last_result,
                                                    args.domain_map,
                                                    f"{session.loaded.pdb_id} chain {session.target_chain}")

        if args.html:
            outputs['html'] = write_html_view(session, args, context)

        print_result(session, args, outputs)
    finally:
        session.close()
    return 0


def write_html_view(session: ViewerSession, args: argparse.Namespace,
                    context: ApplicationContext) -> str:
    """Replay the session's styling on a py3Dmol view and save it as HTML"""
    from ecodviz.structure.py3dmol_viewer import Py3DmolViewer

    loaded = session.loaded
    viewer = Py3DmolViewer(loaded.index, loaded.text, loaded.format, session.options)
    try:
        styler = DomainStyler(session.options)
        styler.apply_styling(viewer, session.target_chain, session.domains,
                             session.structure_info)
        highlighted = None
        ids = [d.id for d in session.domains]
        if args.highlight in ids:
            highlighted = styler.highlight_domain(viewer, session.domains, ids.index(args.highlight),
                                                  session.target_chain, session.structure_info)
        if highlighted is None:
            viewer.zoom_to({'chain': session.target_chain})
            viewer.render()
        return viewer.write_html(args.html)
    finally:
        viewer.close()


@cli_error_handler
def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    context = ApplicationContext(args.config)

    logger = LoggingManager.configure(
        verbose=args.verbose > 0,
        log_file=args.log_file,
        log_dir=args.log_dir,
        component="ecodviz",
        config=context.config
    )

    if args.command == 'map':
        return run_map(context, args, logger)
    elif args.command == 'render':
        return run_render(context, args, logger)

    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
