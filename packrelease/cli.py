"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import toml
import yaml
from loguru import logger

from packrelease import __version__
from packrelease.exceptions import ConfigParseError, PackReleaseError
from packrelease.logger import setup_logger
from packrelease.models import PackOptions
from packrelease.orchestrator import parse_pack


def load_config(config_path: str) -> dict:
    """加载配置文件"""
    path = Path(config_path)

    if not path.exists():
        raise click.ClickException(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            data = toml.load(config_path)
        elif suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        else:
            raise click.ClickException(f"不支持的配置文件格式: {suffix}")
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"无法解析配置文件 {config_path}: {e}") from e

    return data or {}


def build_options(config_path: Optional[str], **overrides) -> PackOptions:
    """按 配置文件 < 环境变量 < 命令行参数 的顺序合并配置"""
    options = PackOptions()
    if config_path:
        options = options.merged(PackOptions.from_dict(load_config(config_path)))
    options = options.merged(PackOptions.from_env())
    return options.merged(
        PackOptions(**{k: v for k, v in overrides.items() if v is not None})
    )


def _on_progress(stage: str, count: int):
    logger.debug(f"[{stage}] {count}")


async def run_async(options: PackOptions, output: Optional[str]):
    """异步运行"""
    pack = await parse_pack(options, progress_callback=_on_progress)
    content = json.dumps(pack.to_dict(), indent=2, ensure_ascii=False)

    if output:
        Path(output).write_text(content + "\n", encoding="utf-8")
        logger.success(f"已写入 {len(pack.mods)} 个模组到 {output}")
    else:
        click.echo(content)


@click.command()
@click.option("-c", "--config", "config_path", help="配置文件 (toml/json/yaml)")
@click.option("--packwiz-file", help="packwiz 的 pack.toml 路径")
@click.option("--curseforge-pack-file", help="CurseForge 的 minecraftinstance.json 路径")
@click.option("--curseforge-token", help="CurseForge API Token")
@click.option("--modrinth-token", help="Modrinth API Token")
@click.option("-o", "--output", help="输出文件，默认输出到 stdout")
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
def main(
    config_path: Optional[str],
    packwiz_file: Optional[str],
    curseforge_pack_file: Optional[str],
    curseforge_token: Optional[str],
    modrinth_token: Optional[str],
    output: Optional[str],
    debug: bool,
):
    """packrelease - 整合包模组列表导入工具"""
    setup_logger(level="DEBUG" if debug else None)

    try:
        options = build_options(
            config_path,
            packwiz_file=packwiz_file,
            curseforge_pack_file=curseforge_pack_file,
            curseforge_token=curseforge_token,
            modrinth_token=modrinth_token,
        )
        asyncio.run(run_async(options, output))
    except click.ClickException:
        raise
    except PackReleaseError as e:
        logger.error(f"导入失败: {e}")
        raise click.ClickException(str(e))
    except Exception as e:
        logger.exception(f"运行时错误: {e}")
        raise click.ClickException(f"运行时错误: {e}")


if __name__ == "__main__":
    main()
