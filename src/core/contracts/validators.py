"""
JSON Schema Contract Validators

Модуль для валидации входных данных внешних вызывающих сторон согласно
формальным JSON Schema контрактам.

Схемы в contracts/schema/ ссылаются друг на друга через $ref по $id:
trade_request.json встраивает pool_state.json. Все схемы каталога
регистрируются в referencing.Registry, через который jsonschema
разрешает ссылки без обращения к сети.

Схемы:
- pool_state.json (снимок пула)
- trade_request.json (запрос котировки, pool → $ref pool_state.json)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator
from referencing import Registry
from referencing.jsonschema import DRAFT202012


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов и реестра ссылок между ними.

    По умолчанию читает contracts/schema/ относительно корня проекта.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._registry: Registry | None = None

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'pool_state')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-валидацию
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema

    @property
    def registry(self) -> Registry:
        """
        Реестр всех схем каталога, ключ — $id.

        Raises:
            ValueError: Схема без $id (на неё нельзя сослаться)
        """
        if self._registry is None:
            resources = []
            for path in sorted(self._schema_dir.glob("*.json")):
                schema = self.load_schema(path.stem)
                schema_id = schema.get("$id")
                if not schema_id:
                    raise ValueError(f"Schema {path.name} has no $id")
                resources.append((schema_id, DRAFT202012.create_resource(schema)))
            self._registry = Registry().with_resources(resources)
        return self._registry

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        """Валидатор схемы с разрешением $ref через реестр каталога."""
        return Draft202012Validator(self.load_schema(schema_name), registry=self.registry)


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидация данных против одной схемы каталога."""

    def __init__(self, schema_name: str, loader: SchemaLoader | None = None):
        self.schema_name = schema_name
        self.validator = (loader or _SCHEMA_LOADER).validator_for(schema_name)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)


class TradeRequestValidator(ContractValidator):
    """Валидатор для trade_request контракта."""

    def __init__(self, loader: SchemaLoader | None = None):
        super().__init__("trade_request", loader)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_trade_request(data: Dict[str, Any]) -> None:
    """
    Валидация trade_request данных (включая вложенный pool_state).

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    TradeRequestValidator().validate(data)
