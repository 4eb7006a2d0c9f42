from dataclasses import dataclass, field
from typing import Optional

from splice.config import SpliceConfig
from splice.spec import ParserProtocol, SemanticAnalyzerProtocol, TranspilerProtocol


@dataclass
class RefactorContext:
    # Any collaborator may be None or only partially implemented.
    parser: Optional[ParserProtocol] = None
    analyzer: Optional[SemanticAnalyzerProtocol] = None
    transpiler: Optional[TranspilerProtocol] = None
    config: SpliceConfig = field(default_factory=SpliceConfig)
