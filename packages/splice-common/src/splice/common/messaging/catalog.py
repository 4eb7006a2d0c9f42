import json
import os
from pathlib import Path
from typing import Dict, List, Optional


class MessageCatalog:
    """
    Resolves dotted message ids (e.g. "rename.run.success") to templates.

    Templates live in `<root>/<lang>/*.json`. Later roots override earlier ones,
    so a project can shadow the packaged defaults with `.splice/messages/<lang>`.
    Lookup order: target language, then "en", then the id itself.
    """

    def __init__(self, roots: List[Path], default_lang: str = "en"):
        self.roots = roots
        self.default_lang = default_lang
        self._registry: Dict[str, Dict[str, str]] = {}

    def _load_lang(self, lang: str) -> Dict[str, str]:
        if lang in self._registry:
            return self._registry[lang]

        merged: Dict[str, str] = {}
        for root in self.roots:
            lang_dir = root / lang
            if not lang_dir.is_dir():
                continue
            for path in sorted(lang_dir.glob("*.json")):
                try:
                    with path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                except (json.JSONDecodeError, OSError):
                    continue
                if isinstance(data, dict):
                    merged.update({str(k): str(v) for k, v in data.items()})

        self._registry[lang] = merged
        return merged

    def get(self, msg_id: str, lang: Optional[str] = None) -> str:
        key = str(msg_id)
        target_lang = lang or os.getenv("SPLICE_LANG", self.default_lang)

        value = self._load_lang(target_lang).get(key)
        if value is not None:
            return value

        if target_lang != self.default_lang:
            value = self._load_lang(self.default_lang).get(key)
            if value is not None:
                return value

        return key
