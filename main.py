# main.py

import argparse
import logging
import sys
from pathlib import Path

from PyQt5.QtWidgets import QApplication

from highlighting.coordinate_mapper import CoordinateMapper, NumberingScheme
from highlighting.highlight_bridge import HighlightBridge
from highlighting.scheduler import QtTimerScheduler
from highlighting.structure_renderer import HeadlessRenderer
from model.selection_export import export_selection
from model.selection_types import SelectionMode
from repositories.repository_factory import RepositoryFactory
from repositories.sequence_data_manager import SequenceDataManager
from settings.config import AppConfig, DataSourceSettings
from widgets.workspace import SequenceWorkspaceWidget

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Residue grid synchronised with a structure renderer")
    parser.add_argument("structure_id", nargs="?", help="structure to load on start, e.g. 1CRN")
    parser.add_argument("--fasta", type=Path, help="read sequences from a FASTA file instead of RCSB")
    parser.add_argument("--mode", choices=[m.value for m in SelectionMode], help="initial selection mode")
    parser.add_argument("--export", type=Path, help="write the final selection as JSON on exit")
    parser.add_argument("--log-level", help="override the configured log level")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    config = AppConfig()
    if args.fasta is not None:
        config.data_source = DataSourceSettings(type="file", config={"fasta_path": str(args.fasta)})
    if args.mode is not None:
        config.selection.mode = SelectionMode(args.mode)
    if args.log_level:
        config.logging.level = args.log_level.upper()
    return config


def main(argv=None):
    args = parse_args(argv)
    config = build_config(args)

    logging.basicConfig(level=config.logging.level, format=config.logging.format)

    app = QApplication(sys.argv[:1])

    # Sekans kaynağını oluştur
    manager = SequenceDataManager(RepositoryFactory(config).create_repository())

    # 3-D motor bağlı değil; headless renderer ile köprüyü kur
    renderer = HeadlessRenderer()
    numbering = NumberingScheme.AUTH if config.highlight.use_auth_numbering else NumberingScheme.LABEL
    mapper = CoordinateMapper(numbering, renderer)
    bridge = HighlightBridge(
        renderer,
        mapper,
        QtTimerScheduler(app),
        hover_debounce_ms=config.highlight.hover_debounce_ms,
        auto_focus=config.highlight.auto_focus,
        max_regions=config.highlight.max_regions,
    )

    def on_structure_loaded(data) -> None:
        renderer.load_structure(data.id, data.chain_ids)

    # Ana pencereyi oluştur
    viewer = SequenceWorkspaceWidget(
        config,
        manager,
        bridge=bridge,
        on_structure_loaded=on_structure_loaded,
    )
    viewer.setWindowTitle("Sequence Sync - Residue Grid")
    viewer.resize(1200, 600)
    viewer.show()

    if args.structure_id:
        viewer.load_structure(args.structure_id)

    exit_code = app.exec_()

    # Çıkışta son seçimi JSON olarak yaz
    if args.export is not None and viewer.grid.data is not None:
        payload = export_selection(viewer.grid.store.selection, viewer.grid.data.id)
        args.export.write_text(payload.model_dump_json(indent=2), encoding="utf-8")
        logger.info("Selection written to %s", args.export)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
