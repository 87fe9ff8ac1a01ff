from pathlib import Path

import structlog
from pydantic import ValidationError

from sbomgate.models.vex import VexDocument

logger = structlog.get_logger('vex_loader')


def load_documents(filepath: str | Path) -> list[VexDocument]:
    """Load VEX statements from a JSONL file, skipping lines that do not validate."""
    path = Path(filepath)
    if not path.exists():
        logger.warning('VEX document file not found', path=str(path))
        return []

    documents = []
    skipped = 0
    with path.open(encoding='utf-8') as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                documents.append(VexDocument.model_validate_json(line))
            except ValidationError as e:
                skipped += 1
                logger.warning(
                    'Skipping invalid VEX document',
                    path=str(path), line=lineno, errors=e.error_count(),
                )
    logger.info(
        'Loaded VEX documents', path=str(path),
        documents=len(documents), skipped=skipped,
    )
    return documents
