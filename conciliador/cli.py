"""
Command-line entry point.

Reads already-extracted report texts (one .txt per document kind), runs a
reconciliation mode and prints the run as JSON.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from .config import get_settings
from .integrations import build_model_client
from .models import Document, DocumentKey, Rodada
from .reconciliation import ReconciliationPipeline
from .reporting import build_export_rows
from .utils.log_config import configure_logging

logger = structlog.get_logger()


def load_documents(paths: Dict[DocumentKey, Optional[str]]) -> Dict[DocumentKey, Document]:
    """Read text files; unreadable files are skipped with a warning."""
    settings = get_settings()
    documents = {}
    for key, path in paths.items():
        if not path:
            continue
        try:
            text = Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Could not read document", key=key.value, path=path, error=str(e))
            continue
        documents[key] = Document(
            key=key,
            full_text=text,
            preview=text[:settings.preview_max_chars],
            original_name=Path(path).name,
            kind="texto",
            length_chars=len(text),
        )
    return documents


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="conciliador",
        description="Conciliação de fornecedores a partir de relatórios já extraídos em texto.",
    )
    parser.add_argument("--fornecedor", required=True, help="Nome do fornecedor")
    parser.add_argument(
        "--rodada",
        default=Rodada.RODADA1.value,
        choices=[r.value for r in Rodada],
        help="Modo de conciliação",
    )
    for key in DocumentKey:
        parser.add_argument(f"--{key.value.replace('_', '-')}", dest=key.value, default=None)
    parser.add_argument(
        "--export-rows",
        action="store_true",
        help="Inclui as linhas achatadas para exportação",
    )
    return parser


async def _run(args: argparse.Namespace) -> Dict:
    settings = get_settings()
    documents = load_documents({key: getattr(args, key.value) for key in DocumentKey})

    client = build_model_client(settings)
    pipeline = ReconciliationPipeline(model_client=client, settings=settings)
    try:
        run = await pipeline.run(args.rodada, args.fornecedor, documents)
    finally:
        if client is not None:
            await client.close()

    output = run.to_dict()
    if args.export_rows and run.result is not None:
        output["linhasExportacao"] = {
            sheet: [row.to_dict() for row in rows]
            for sheet, rows in build_export_rows(args.fornecedor, run.result).items()
        }
    return output


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    args = build_parser().parse_args(argv)

    if not any(getattr(args, key.value) for key in DocumentKey):
        print("Nenhum relatório informado.", file=sys.stderr)
        return 2

    output = asyncio.run(_run(args))
    print(json.dumps(output, ensure_ascii=False, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
