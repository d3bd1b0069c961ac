import json
from pathlib import Path
from litellm import acompletion
from core.file_io import FilesystemFileReader, OutputWriter


CONFIG_DIR = Path.home() / ".ngshift"
CONFIG_FILE = CONFIG_DIR / "settings.json"


def get_config_file(config_file: Path = CONFIG_FILE) -> dict:
    if not config_file.exists():
        return {}
    file_content = FilesystemFileReader().read_file(config_file)
    return json.loads(file_content) if file_content.strip() else {}


def save_config(model: str, api_key: str, config_file: Path = CONFIG_FILE) -> Path:
    data = json.dumps({"model": model, "api_key": api_key})
    return OutputWriter(config_file.parent).write(Path(config_file.name), data)


async def ask_llm(model_name: str, api_key: str | None, system: str, user: str) -> str:
    response = await acompletion(
        model=model_name,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        api_key=api_key,
        num_retries=3,
    )
    return response.choices[0].message.content or ""
