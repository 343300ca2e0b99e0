from enum import Enum

from caseconverter import camelcase, cobolcase, flatcase, kebabcase, macrocase, pascalcase, snakecase, titlecase


class CaseFormat(str, Enum):
    CAMEL_CASE = "camelCase"
    PASCAL_CASE = "PascalCase"
    SNAKE_CASE = "snake_case"
    KEBAB_CASE = "kebab-case"
    MACRO_CASE = "MACROCASE"
    COBOL_CASE = "COBOL-CASE"
    FLAT_CASE = "flatcase"
    TITLE_CASE = "TitleCase"


CASE_CONVERTERS = {
    CaseFormat.CAMEL_CASE: camelcase,
    CaseFormat.PASCAL_CASE: pascalcase,
    CaseFormat.SNAKE_CASE: snakecase,
    CaseFormat.KEBAB_CASE: kebabcase,
    CaseFormat.MACRO_CASE: macrocase,
    CaseFormat.COBOL_CASE: cobolcase,
    CaseFormat.FLAT_CASE: flatcase,
    CaseFormat.TITLE_CASE: titlecase,
}


def convert_name(name: str, target_case: CaseFormat | None) -> str:
    """Convert a name to the specified case format.

    Args:
        name: The name to convert
        target_case: The target case format, or None to keep the name as is

    Returns:
        The converted name
    """
    if target_case is None:
        return name
    return str(CASE_CONVERTERS[target_case](name))
