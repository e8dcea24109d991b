import json
import logging
from pathlib import Path
from typing import Protocol

from .builtin import default_templates
from .errors import TemplateException, TemplateNotFound
from .models import Template, load_template

logger = logging.getLogger(__name__)


class TemplateStore(Protocol):
    def get_by_id(self, template_id: str) -> Template | None: ...

    def list_all(self) -> list[Template]: ...


class BuiltinTemplateStore:
    def __init__(self):
        self._templates = {t.id: t for t in default_templates()}

    def get_by_id(self, template_id: str) -> Template | None:
        return self._templates.get(template_id)

    def list_all(self) -> list[Template]:
        return list(self._templates.values())


class FileTemplateStore:
    """Template records stored as ``<id>.json`` files in one directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def get_by_id(self, template_id: str) -> Template | None:
        path = self.directory / f"{template_id}.json"
        if path.parent.resolve() != self.directory.resolve() or not path.is_file():
            return None
        return self._load(path)

    def list_all(self) -> list[Template]:
        if not self.directory.is_dir():
            return []
        return [self._load(path) for path in sorted(self.directory.glob("*.json"))]

    def _load(self, path: Path) -> Template:
        try:
            record = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise TemplateException(f"Failed to read template {path}: {e}") from e

        if isinstance(record, dict) and not record.get("id"):
            record = {**record, "id": path.stem}
        return load_template(record)


class CombinedTemplateStore:
    """Look templates up in each store in order; the first hit wins."""

    def __init__(self, *stores: TemplateStore):
        self.stores = stores

    def get_by_id(self, template_id: str) -> Template | None:
        for store in self.stores:
            template = store.get_by_id(template_id)
            if template is not None:
                return template
        return None

    def list_all(self) -> list[Template]:
        seen: dict[str, Template] = {}
        for store in self.stores:
            for template in store.list_all():
                seen.setdefault(template.id, template)
        return list(seen.values())


def get_template(store: TemplateStore, template_id: str) -> Template:
    template = store.get_by_id(template_id)
    if template is None:
        raise TemplateNotFound(f"Template not found: {template_id}")
    return template


def get_template_store(config) -> TemplateStore:
    builtin_store = BuiltinTemplateStore()
    if not config.templates_dir:
        return builtin_store
    logger.debug("Loading templates from %s", config.templates_dir)
    return CombinedTemplateStore(FileTemplateStore(config.templates_dir), builtin_store)
