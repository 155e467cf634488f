"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import aiofiles
import click
import toml
import yaml
from loguru import logger

from echoregistry import __version__
from echoregistry.exceptions import ConfigParseError, EchoRegistryError, ValidationError
from echoregistry.logger import setup_logger
from echoregistry.models import RegistryConfig
from echoregistry.orchestrator import EchoRegistry
from echoregistry.services.compatibility import CompatibilityGate
from echoregistry.validation import (
    parse_csv_list,
    validate_matrix_query,
    validate_minecraft_version,
    validate_project_slugs,
)


def load_config(config_path: Optional[str]) -> dict:
    """
    加载配置文件

    Raises:
        ConfigParseError: 文件不存在、格式不支持或解析失败
    """
    if not config_path:
        return {}

    path = Path(config_path)

    if not path.exists():
        raise ConfigParseError(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text())
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text()) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"配置文件解析失败: {e}", context={"path": config_path})

    raise ConfigParseError(f"不支持的配置文件格式: {suffix}", context={"path": config_path})


async def write_output(data: Any, output: Optional[str]):
    """以 JSON 形式输出结果"""
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if not output:
        click.echo(text)
        return
    async with aiofiles.open(output, "w", encoding="utf-8") as f:
        await f.write(text + "\n")
    logger.success(f"结果已写入 {output}")


def run_async(
    ctx: click.Context, action: Callable[[EchoRegistry], Awaitable[Any]]
) -> Any:
    """在新的 EchoRegistry 实例上运行异步操作"""
    config: RegistryConfig = ctx.obj["config"]

    async def runner():
        async with EchoRegistry(config) as registry:
            return await action(registry)

    try:
        return asyncio.run(runner())
    except ValidationError as e:
        raise click.ClickException(f"参数错误: {e}")
    except EchoRegistryError as e:
        logger.error(f"执行失败: {e}")
        raise click.ClickException(str(e))


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(), help="配置文件路径 (toml/json/yaml)"
)
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.option("--log-json", is_flag=True, help="以 JSON 行格式输出日志")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context, config_path: Optional[str], debug: bool, log_json: bool
):
    """EchoRegistry - Minecraft 模组开发依赖版本查询工具"""
    setup_logger(level="DEBUG" if debug else None, serialize=log_json)

    try:
        config = RegistryConfig.from_dict(load_config(config_path)).apply_env()
    except EchoRegistryError as e:
        raise click.ClickException(f"配置错误: {e}")

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("mc_version")
@click.option("-p", "--project", "projects", multiple=True, help="额外的 Modrinth 项目（可多次使用）")
@click.option("--skip-validation", is_flag=True, help="不校验项目是否存在于 Modrinth")
@click.option("-o", "--output", help="输出文件路径")
@click.pass_context
def resolve(
    ctx: click.Context,
    mc_version: str,
    projects: tuple,
    skip_validation: bool,
    output: Optional[str],
):
    """解析指定 Minecraft 版本的全部依赖"""
    config: RegistryConfig = ctx.obj["config"]

    async def action(registry: EchoRegistry):
        version = validate_minecraft_version(mc_version)
        custom = validate_project_slugs(
            p for value in projects for p in parse_csv_list(value)
        )

        if custom and not skip_validation:
            invalid = await registry.find_invalid_projects(custom, version)
            if invalid:
                raise ValidationError(
                    f"以下不是有效的 Modrinth 项目: {', '.join(invalid)}"
                )

        extra = custom + [p for p in config.default_projects if p not in custom]
        records = await registry.resolve_all(version, extra)
        await write_output(
            {
                "mc_version": version,
                "dependencies": [record.to_dict() for record in records],
            },
            output,
        )

    run_async(ctx, action)


@main.command()
@click.option("-p", "--projects", required=True, help="逗号分隔的组件列表")
@click.option("-v", "--versions", required=True, help="逗号分隔的 Minecraft 版本列表")
@click.option("-o", "--output", help="输出文件路径")
@click.pass_context
def matrix(ctx: click.Context, projects: str, versions: str, output: Optional[str]):
    """构建组件 × Minecraft 版本的兼容性矩阵"""

    async def action(registry: EchoRegistry):
        project_list, version_list = validate_matrix_query(projects, versions)
        result = await registry.build_matrix(project_list, version_list)
        await write_output(result, output)

    run_async(ctx, action)


@main.command()
@click.option("--releases-only", is_flag=True, help="只显示正式版本")
@click.option("-o", "--output", help="输出文件路径")
@click.pass_context
def versions(ctx: click.Context, releases_only: bool, output: Optional[str]):
    """列出 Minecraft 版本"""

    async def action(registry: EchoRegistry):
        catalog = await registry.minecraft_versions()
        if releases_only:
            catalog = [v for v in catalog if v.version_type == "release"]
        await write_output({"versions": [v.to_dict() for v in catalog]}, output)

    run_async(ctx, action)


@main.command()
@click.argument("name")
@click.argument("mc_version")
@click.pass_context
def check(ctx: click.Context, name: str, mc_version: str):
    """检查组件是否支持指定的 Minecraft 版本（不发起请求）"""
    config: RegistryConfig = ctx.obj["config"]
    gate = CompatibilityGate(config.minimum_versions)
    if gate.is_compatible(name, mc_version):
        click.echo(f"{name} 支持 Minecraft {mc_version}")
    else:
        click.echo(f"{name} 不支持 Minecraft {mc_version}（需要 {gate.minimum_for(name)} 或更高版本）")
        ctx.exit(1)


@main.command()
@click.pass_context
def health(ctx: click.Context):
    """检查缓存与上游数据源的健康状态"""

    async def action(registry: EchoRegistry):
        report = await registry.check_health()
        await write_output(report, None)
        return report

    report = run_async(ctx, action)
    if report["status"] != "ok":
        ctx.exit(1)


if __name__ == "__main__":
    main()
