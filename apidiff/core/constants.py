"""
Константы системы сравнения публичного API.
"""

# Версия системы
VERSION = "1.0.0"
TOOL_NAME = "API Diff"

# Уровни важности различий (ключи совпадают с Severity.value)
SEVERITY_LEVELS = {
    "Critical": {
        "description": "Удаление типа или сужение доступа, ломающее потребителей",
        "emoji": "🛑",
    },
    "Error": {
        "description": "Ломающее изменение по текущей политике",
        "emoji": "❌",
    },
    "Warning": {
        "description": "Не ломает сборку, но рискованно",
        "emoji": "⚠️",
    },
    "Info": {
        "description": "Информационное изменение",
        "emoji": "ℹ️",
    },
}

# Порядок вывода уровней в отчётах
SEVERITY_ORDER = ["Critical", "Error", "Warning", "Info"]

# Категории результата сравнения и их заголовки
CHANGE_CATEGORIES = {
    "removals": "Удалено",
    "modifications": "Изменено",
    "additions": "Добавлено",
    "excluded": "Исключено",
}

# Поддерживаемые форматы отчётов ("console" = текстовый вывод в терминал)
REPORT_FORMATS = ("console", "json", "markdown", "html")
DEFAULT_REPORT_FORMAT = "console"

# Коды завершения процесса
EXIT_SUCCESS = 0
EXIT_BREAKING_CHANGES = 1
EXIT_COMPARISON_ERROR = 2
EXIT_CONFIGURATION_ERROR = 4
EXIT_INVALID_ARGUMENTS = 5
EXIT_FILE_NOT_FOUND = 6
EXIT_UNEXPECTED_ERROR = 99

EXIT_CODE_DESCRIPTIONS = {
    EXIT_SUCCESS: "Сравнение завершено, ломающих изменений нет",
    EXIT_BREAKING_CHANGES: "Обнаружены ломающие изменения",
    EXIT_COMPARISON_ERROR: "Ошибка сравнения",
    EXIT_CONFIGURATION_ERROR: "Ошибка конфигурации",
    EXIT_INVALID_ARGUMENTS: "Некорректные аргументы",
    EXIT_FILE_NOT_FOUND: "Файл не найден",
    EXIT_UNEXPECTED_ERROR: "Непредвиденная ошибка",
}

# Ограничение на число различий одной категории в текстовых отчётах
MAX_CHANGES_IN_TEXT_REPORT = 200
