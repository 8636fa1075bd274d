from pathlib import Path

from itemlister.normalization.exceptions import PromptTemplateError

NORMALIZATION_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(filename: str, prompt_dir: Path | None = None) -> str:
    """Load a prompt template from a file.

    Args:
        filename: Template file name, or an absolute path.
        prompt_dir: Directory to resolve relative names against.
                    Defaults to the bundled normalization prompts.

    Returns:
        The raw template string with `str.format` placeholders.

    Raises:
        PromptTemplateError: if the file cannot be read.
    """
    path = Path(filename)
    if not path.is_absolute():
        path = (prompt_dir or NORMALIZATION_PROMPT_DIR) / path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PromptTemplateError(f"Failed to load prompt template: {exc}") from exc
