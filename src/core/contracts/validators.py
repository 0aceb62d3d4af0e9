"""
Audit Contract Validators

Проверка audit событий и снапшотов состояния против JSON Schema
контрактов (Draft 2020-12) из contracts/schema/:
- mint_event.json / burn_event.json — события движка
- curve_state.json — снапшот CurveState
- escrow_record.json — запись escrow

Pydantic модели проверяются после дампа в JSON режим, т.е. в той форме, в
которой событие уходит во внешний audit log.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import jsonschema
from jsonschema import Draft202012Validator
from pydantic import BaseModel

# contracts/schema в корне репозитория
DEFAULT_SCHEMA_DIR = Path(__file__).resolve().parents[3] / "contracts" / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение и кэширование контрактов.

    Схема проходит meta-validation один раз при первой загрузке; дальше
    отдаётся тот же dict.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self.schema_dir = Path(schema_dir) if schema_dir is not None else DEFAULT_SCHEMA_DIR
        if not self.schema_dir.is_dir():
            raise RuntimeError(f"Contract directory not found: {self.schema_dir}")
        self._cache: Dict[str, Dict[str, Any]] = {}

    def schema_names(self) -> List[str]:
        """Имена доступных контрактов (без .json)."""
        return sorted(path.stem for path in self.schema_dir.glob("*.json"))

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Контракт по имени ('mint_event', 'curve_state', ...).

        Raises:
            FileNotFoundError: Контракта нет в schema_dir
            ValueError: Файл не является корректной Draft 2020-12 схемой
        """
        cached = self._cache.get(schema_name)
        if cached is not None:
            return cached

        path = self.schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Contract not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as exc:
            raise ValueError(f"Contract {schema_name} is not a valid schema: {exc.message}") from exc

        self._cache[schema_name] = schema
        return schema


# Контракты неизменяемы, один загрузчик на процесс
_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидатор одного контракта."""

    schema_name: str = ""

    def __init__(self, loader: Optional[SchemaLoader] = None):
        self.schema = (loader or _LOADER).load_schema(self.schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            jsonschema.ValidationError: первое нарушение контракта
        """
        self._validator.validate(data)

    def validate_model(self, model: BaseModel) -> None:
        """Проверка pydantic модели в её JSON форме."""
        self._validator.validate(model.model_dump(mode="json"))

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self._validator.iter_errors(data)

    def describe_errors(self, data: Dict[str, Any]) -> List[str]:
        """Все нарушения в виде 'path: message' (для логов)."""
        messages = []
        for error in sorted(self._validator.iter_errors(data), key=lambda e: list(e.path)):
            location = "/".join(str(part) for part in error.path) or "<root>"
            messages.append(f"{location}: {error.message}")
        return messages


class MintEventValidator(ContractValidator):
    schema_name = "mint_event"


class BurnEventValidator(ContractValidator):
    schema_name = "burn_event"


class CurveStateValidator(ContractValidator):
    schema_name = "curve_state"


class EscrowRecordValidator(ContractValidator):
    schema_name = "escrow_record"


# =============================================================================
# FUNCTIONS
# =============================================================================


def validate_mint_event(data: Dict[str, Any]) -> None:
    MintEventValidator().validate(data)


def validate_burn_event(data: Dict[str, Any]) -> None:
    BurnEventValidator().validate(data)


def validate_curve_state(data: Dict[str, Any]) -> None:
    CurveStateValidator().validate(data)


def validate_escrow_record(data: Dict[str, Any]) -> None:
    EscrowRecordValidator().validate(data)
