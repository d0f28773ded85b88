"""
JSON Schema Contract Validators

Модуль для валидации JSON документов движка ценообразования согласно
формальным JSON Schema контрактам в contracts/schema/.
Использует библиотеку jsonschema для проверки соответствия данных схемам.

Схемы:
- fee_result.json (снапшот FeeResult в записи платежа)
- rate_table.json (файл переопределений таблицы тарифов)
- fee_config.json (публичный документ ставок платформы)
- minimums_config.json (публичный документ минимумов по странам)
"""

import json
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Автоматически находит схемы в contracts/schema/ относительно корня проекта.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'fee_result')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation самой схемы
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """
        Итератор по всем ошибкам валидации.

        Yields:
            ValidationError объекты для каждой найденной ошибки
        """
        return self.validator.iter_errors(data)

    def error_messages(self, data: Dict[str, Any]) -> list[str]:
        """Все ошибки валидации в виде строк "path: message" (для отчётов CLI)."""
        messages = []
        errors = sorted(self.validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
        for error in errors:
            path = "/".join(str(p) for p in error.path) or "<root>"
            messages.append(f"{path}: {error.message}")
        return messages


class FeeResultValidator(ContractValidator):
    """Валидатор снапшота FeeResult."""

    def __init__(self):
        super().__init__("fee_result")


class RateTableValidator(ContractValidator):
    """Валидатор файла переопределений таблицы тарифов."""

    def __init__(self):
        super().__init__("rate_table")


class FeeConfigValidator(ContractValidator):
    """Валидатор публичного документа ставок."""

    def __init__(self):
        super().__init__("fee_config")


class MinimumsConfigValidator(ContractValidator):
    """Валидатор публичного документа минимумов."""

    def __init__(self):
        super().__init__("minimums_config")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_fee_result(data: Dict[str, Any]) -> None:
    """
    Валидация снапшота FeeResult.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    FeeResultValidator().validate(data)


def validate_rate_table(data: Dict[str, Any]) -> None:
    """
    Валидация документа переопределений таблицы тарифов.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    RateTableValidator().validate(data)


def validate_fee_config(data: Dict[str, Any]) -> None:
    """
    Валидация документа ставок платформы.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    FeeConfigValidator().validate(data)


def validate_minimums_config(data: Dict[str, Any]) -> None:
    """
    Валидация документа минимумов.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    MinimumsConfigValidator().validate(data)
