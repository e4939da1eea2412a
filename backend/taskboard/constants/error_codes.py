"""Error codes dictionary.

Single source of truth for every error code the API returns: whether the
client may retry, and the user-facing message in each supported locale.
"""

from typing import TypedDict


class ErrorCodeSpec(TypedDict, total=False):
    """Specification for an error code."""

    retryable: bool
    messages: dict[str, str]


ERROR_CODES: dict[str, ErrorCodeSpec] = {
    # ==========================================================================
    # Authentication / authorization
    # ==========================================================================
    "UNAUTHORIZED": {
        "retryable": False,
        "messages": {
            "en": "Authentication required",
            "ru": "Необходима авторизация",
        },
    },
    "PROJECT_ACCESS_DENIED": {
        "retryable": False,
        "messages": {
            "en": "Project not found or access denied",
            "ru": "Проект не найден или нет доступа",
        },
    },
    "PERMISSION_DENIED": {
        "retryable": False,
        "messages": {
            "en": "You do not have permission to perform this action",
            "ru": "Недостаточно прав для выполнения действия",
        },
    },
    "OWNER_ONLY": {
        "retryable": False,
        "messages": {
            "en": "Only the project owner can perform this action",
            "ru": "Только владелец может выполнить это действие",
        },
    },
    "OWNER_ROLE_IMMUTABLE": {
        "retryable": False,
        "messages": {
            "en": "The owner's role cannot be changed",
            "ru": "Нельзя изменить роль владельца",
        },
    },
    "OWNER_CANNOT_BE_REMOVED": {
        "retryable": False,
        "messages": {
            "en": "The project owner cannot be removed",
            "ru": "Нельзя удалить владельца проекта",
        },
    },
    "ADMIN_CANNOT_REMOVE_ADMIN": {
        "retryable": False,
        "messages": {
            "en": "An administrator cannot remove another administrator",
            "ru": "Администратор не может удалить другого администратора",
        },
    },
    # ==========================================================================
    # Not found
    # ==========================================================================
    "NOT_FOUND": {
        "retryable": False,
        "messages": {"en": "Not found", "ru": "Не найдено"},
    },
    "TASK_NOT_FOUND": {
        "retryable": False,
        "messages": {"en": "Task not found", "ru": "Задача не найдена"},
    },
    "MEMBER_NOT_FOUND": {
        "retryable": False,
        "messages": {"en": "Member not found", "ru": "Участник не найден"},
    },
    "INVITATION_NOT_FOUND": {
        "retryable": False,
        "messages": {"en": "Invitation not found", "ru": "Приглашение не найдено"},
    },
    # ==========================================================================
    # Validation
    # ==========================================================================
    "VALIDATION_ERROR": {
        "retryable": False,
        "messages": {"en": "Invalid input", "ru": "Некорректные данные"},
    },
    "ASSIGNEE_NOT_MEMBER": {
        "retryable": False,
        "messages": {
            "en": "The assignee must be a member of the project",
            "ru": "Исполнитель должен быть участником проекта",
        },
    },
    "INVALID_ROLE": {
        "retryable": False,
        "messages": {
            "en": "Role must be ADMIN or MEMBER",
            "ru": "Роль должна быть ADMIN или MEMBER",
        },
    },
    "INVITATION_EXPIRED": {
        "retryable": False,
        "messages": {
            "en": "This invitation has expired",
            "ru": "Срок действия приглашения истёк",
        },
    },
    "INVITATION_EMAIL_MISMATCH": {
        "retryable": False,
        "messages": {
            "en": "This invitation was sent to a different email",
            "ru": "Это приглашение предназначено для другого email",
        },
    },
    "PUBLIC_INVITATION_NOT_DECLINABLE": {
        "retryable": False,
        "messages": {
            "en": "A public invitation link cannot be declined",
            "ru": "Публичную ссылку-приглашение нельзя отклонить",
        },
    },
    "CANNOT_INVITE_SELF": {
        "retryable": False,
        "messages": {
            "en": "You cannot invite yourself",
            "ru": "Нельзя пригласить самого себя",
        },
    },
    # ==========================================================================
    # Conflicts
    # ==========================================================================
    "ALREADY_MEMBER": {
        "retryable": False,
        "messages": {
            "en": "The user is already a member of this project",
            "ru": "Пользователь уже является участником проекта",
        },
    },
    "INVITATION_ALREADY_SENT": {
        "retryable": False,
        "messages": {
            "en": "An invitation has already been sent to this email",
            "ru": "Приглашение уже отправлено на этот email",
        },
    },
    "INVITATION_ALREADY_USED": {
        "retryable": False,
        "messages": {
            "en": "This invitation has already been used",
            "ru": "Приглашение уже использовано",
        },
    },
    # ==========================================================================
    # AI assistant
    # ==========================================================================
    "RATE_LIMITED": {
        "retryable": True,
        "messages": {
            "en": "Too many requests. Try again in {reset_in} s.",
            "ru": "Превышен лимит запросов. Попробуйте через {reset_in} сек.",
        },
    },
    "AI_RATE_LIMITED": {
        "retryable": True,
        "messages": {
            "en": "The AI provider rate limit was exceeded",
            "ru": "Превышен лимит запросов к AI",
        },
    },
    "AI_AUTH_ERROR": {
        "retryable": False,
        "messages": {
            "en": "The AI provider rejected the credentials",
            "ru": "Ошибка авторизации AI",
        },
    },
    "AI_SERVER_ERROR": {
        "retryable": True,
        "messages": {"en": "AI server error", "ru": "Ошибка сервера AI"},
    },
    "AI_GENERATION_ERROR": {
        "retryable": True,
        "messages": {"en": "Generation failed", "ru": "Ошибка генерации"},
    },
    "AI_INVALID_RESPONSE": {
        "retryable": True,
        "messages": {
            "en": "The AI returned an invalid response",
            "ru": "Некорректный ответ от AI",
        },
    },
    # ==========================================================================
    # System errors
    # ==========================================================================
    "INTERNAL_ERROR": {
        "retryable": False,
        "messages": {"en": "Internal server error", "ru": "Внутренняя ошибка сервера"},
    },
    "SERVICE_UNAVAILABLE": {
        "retryable": True,
        "messages": {
            "en": "Service is temporarily unavailable. Try again later",
            "ru": "Сервис временно недоступен. Попробуйте позже",
        },
    },
}

# Column labels shown on the board and in analytics
STATUS_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "TODO": "To do",
        "IN_PROGRESS": "In progress",
        "REVIEW": "In review",
        "DONE": "Done",
    },
    "ru": {
        "TODO": "К выполнению",
        "IN_PROGRESS": "В работе",
        "REVIEW": "На проверке",
        "DONE": "Готово",
    },
}


def get_error_spec(code: str) -> ErrorCodeSpec:
    """Get error specification by code."""
    return ERROR_CODES.get(code, {"retryable": False})


def is_retryable(code: str) -> bool:
    spec = get_error_spec(code)
    return spec.get("retryable", False)


def get_error_message(code: str, locale: str = "en", **params: object) -> str:
    """Resolve the user-facing message for a code, falling back to English."""
    messages = get_error_spec(code).get("messages") or ERROR_CODES["INTERNAL_ERROR"]["messages"]
    template = messages.get(locale) or messages["en"]
    return template.format(**params) if params else template


def get_status_label(status: str, locale: str = "en") -> str:
    labels = STATUS_LABELS.get(locale, STATUS_LABELS["en"])
    return labels.get(status, status)
