"""Pydantic schemas for code snippets."""

from datetime import datetime
from enum import Enum

from pydantic import ConfigDict, Field

from playground.schemas.base import WireModel


class Language(str, Enum):
    """Programming languages supported by the playground."""

    JAVASCRIPT = "JAVASCRIPT"
    PYTHON = "PYTHON"
    JAVA = "JAVA"


class LanguageConfig(WireModel):
    """Display and editor settings for a language."""

    model_config = ConfigDict(frozen=True)

    name: str
    extension: str
    editor_language: str
    default_code: str
    color: str


LANGUAGE_CONFIG: dict[Language, LanguageConfig] = {
    Language.JAVASCRIPT: LanguageConfig(
        name="JavaScript",
        extension="js",
        editor_language="javascript",
        default_code='console.log("Hello, World!");',
        color="#f7df1e",
    ),
    Language.PYTHON: LanguageConfig(
        name="Python",
        extension="py",
        editor_language="python",
        default_code='print("Hello, World!")',
        color="#3776ab",
    ),
    Language.JAVA: LanguageConfig(
        name="Java",
        extension="java",
        editor_language="java",
        default_code=(
            "public class Main {\n"
            "    public static void main(String[] args) {\n"
            '        System.out.println("Hello, World!");\n'
            "    }\n"
            "}"
        ),
        color="#ed8b00",
    ),
}


def starter_code(language: Language) -> str:
    """Get the canonical starter text for a language."""
    return LANGUAGE_CONFIG[language].default_code


class Snippet(WireModel):
    """A saved snippet as returned by the backend."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    code: str
    language: Language
    author_name: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime
    execution_count: int = 0
    share_count: int = 0


class SnippetRequest(WireModel):
    """Body for creating or replacing a snippet."""

    title: str = Field(..., max_length=255)
    code: str = Field(..., min_length=1)
    language: Language
    author_name: str = Field(..., max_length=100)
