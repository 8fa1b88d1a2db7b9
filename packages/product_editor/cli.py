"""商品编辑 CLI - 商城后台商品编辑工具

在终端中完成 加载商品 -> 修改字段 -> 上传图片 -> 保存 的完整流程。

Examples:
    查看商品::

        $ product-admin show 62a1f0c2b3d4e5f6a7b8c9d0

    修改并保存::

        $ product-admin edit 62a1f0c2b3d4e5f6a7b8c9d0 \\
            --set price=19.9 --set countInStock=20 \\
            --featured-image-file cover.png --featured

    保存/清除登录会话::

        $ product-admin login --token xxx
        $ product-admin logout
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from packages.common.logger import setup_file_logger, setup_logger

from .api_client import ProductApiClient
from .config import EditorSettings, get_settings
from .editor import ProductEditor
from .errors import FormValidationError
from .feedback import ConsoleNotifier, RecordingNavigator
from .form import PRODUCT_FORM_FIELDS
from .models import Users
from .session import FileSessionStore, InMemorySession, SessionProvider
from .status import UploadTarget

app = typer.Typer(
    name="product-admin",
    help="商城后台商品编辑工具",
    add_completion=False,
)
console = Console()


def parse_assignments(items: List[str]) -> dict[str, str]:
    """解析 ``field=value`` 形式的参数.

    Raises:
        typer.BadParameter: 缺少等号或字段名为空

    Examples:
        >>> parse_assignments(["price=9.99", "name=Widget"])
        {'price': '9.99', 'name': 'Widget'}
    """
    result: dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise typer.BadParameter(f"格式应为 field=value: {item}")
        result[key.strip()] = value
    return result


def build_session(settings: EditorSettings) -> SessionProvider:
    """令牌优先, 否则读取会话文件."""
    if settings.token:
        return InMemorySession.from_token(settings.token)
    return FileSessionStore(settings.session_file)


def build_api_client(settings: EditorSettings) -> ProductApiClient:
    return ProductApiClient(settings.api_base_url, timeout=settings.timeout)


def configure_logging(settings: EditorSettings) -> None:
    setup_logger("product_admin", level=settings.log_level, simple=not settings.debug)
    if settings.log_file:
        setup_file_logger("product_admin", settings.log_file, level=settings.log_level)


def render_editor(editor: ProductEditor) -> Table:
    """渲染编辑中的商品字段."""
    table = Table(title=editor.title)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for field in PRODUCT_FORM_FIELDS:
        value = editor.form.get_value(field.name)
        table.add_row(field.label, "" if value is None else str(value))
    table.add_row("Is Featured", "yes" if editor.is_featured else "no")
    return table


def _print_form_errors(errors: dict[str, str]) -> None:
    for name, help_text in errors.items():
        console.print(f"[red]{name}[/red]: {help_text}")


async def _open_editor(
    product_id: str, settings: EditorSettings, api: ProductApiClient
) -> tuple[ProductEditor, RecordingNavigator, int]:
    navigator = RecordingNavigator()
    editor = ProductEditor(
        product_id,
        api=api,
        session=build_session(settings),
        notifier=ConsoleNotifier(),
        navigator=navigator,
        login_path=settings.login_path,
        products_path=settings.products_path,
    )
    if await editor.mount():
        return editor, navigator, 0
    if navigator.current == settings.login_path:
        console.print("[red]未登录, 请先登录后再编辑商品[/red]")
    else:
        console.print(f"[red]{editor.status.fetch.message}[/red]")
    return editor, navigator, 1


async def run_show(product_id: str, settings: EditorSettings) -> int:
    async with build_api_client(settings) as api:
        editor, _, code = await _open_editor(product_id, settings, api)
        if code == 0:
            console.print(render_editor(editor))
        return code


async def run_edit(
    product_id: str,
    settings: EditorSettings,
    *,
    assignments: dict[str, str],
    image_file: Optional[Path] = None,
    featured_image_file: Optional[Path] = None,
    featured: Optional[bool] = None,
) -> int:
    """执行完整编辑流程, 返回退出码."""
    async with build_api_client(settings) as api:
        editor, navigator, code = await _open_editor(product_id, settings, api)
        if code:
            return code

        try:
            editor.form.update(assignments)
        except KeyError as exc:
            console.print(f"[red]{exc.args[0]}[/red]")
            return 1
        except FormValidationError as exc:
            _print_form_errors(exc.errors)
            return 1

        if featured is not None:
            editor.set_featured(featured)

        uploads = [
            editor.upload_asset(path, target)
            for path, target in (
                (image_file, UploadTarget.IMAGE),
                (featured_image_file, UploadTarget.FEATURED_IMAGE),
            )
            if path is not None
        ]
        if uploads and not all(await asyncio.gather(*uploads)):
            return 1

        saved = await editor.save()
        if editor.form.errors:
            _print_form_errors(editor.form.errors)
            return 1
        if not saved:
            return 1

        console.print(render_editor(editor))
        logger.debug("已返回: {}", navigator.current)
        return 0


@app.command()
def show(
    product_id: str = typer.Argument(..., help="商品ID"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="配置文件路径", exists=True, dir_okay=False
    ),
) -> None:
    """加载并显示商品的可编辑字段"""
    settings = get_settings(config_path)
    configure_logging(settings)
    raise typer.Exit(code=asyncio.run(run_show(product_id, settings)))


@app.command()
def edit(
    product_id: str = typer.Argument(..., help="商品ID"),
    assignments: Optional[List[str]] = typer.Option(
        None, "--set", "-s", help="修改字段, 格式 field=value, 可重复"
    ),
    image_file: Optional[Path] = typer.Option(
        None, "--image-file", help="上传为主图", exists=True, dir_okay=False
    ),
    featured_image_file: Optional[Path] = typer.Option(
        None, "--featured-image-file", help="上传为推荐位图片", exists=True, dir_okay=False
    ),
    featured: Optional[bool] = typer.Option(
        None, "--featured/--not-featured", help="设置是否推荐"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="配置文件路径", exists=True, dir_okay=False
    ),
) -> None:
    """修改商品字段, 上传图片并保存"""
    settings = get_settings(config_path)
    configure_logging(settings)
    code = asyncio.run(
        run_edit(
            product_id,
            settings,
            assignments=parse_assignments(assignments or []),
            image_file=image_file,
            featured_image_file=featured_image_file,
            featured=featured,
        )
    )
    raise typer.Exit(code=code)


@app.command()
def login(
    token: str = typer.Option(
        ..., "--token", "-t", help="管理员 Bearer 令牌", prompt=True, hide_input=True
    ),
    name: str = typer.Option("", "--name", help="管理员名称"),
    email: str = typer.Option("", "--email", help="管理员邮箱"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="配置文件路径", exists=True, dir_okay=False
    ),
) -> None:
    """保存登录会话到会话文件"""
    settings = get_settings(config_path)
    configure_logging(settings)
    store = FileSessionStore(settings.session_file)
    store.save(Users(id="", name=name, email=email, is_admin=True, token=token))
    console.print(f"[green]✓[/green] 会话已保存: {store.session_file}")


@app.command()
def logout(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="配置文件路径", exists=True, dir_okay=False
    ),
) -> None:
    """删除会话文件"""
    settings = get_settings(config_path)
    configure_logging(settings)
    FileSessionStore(settings.session_file).clear()
    console.print("[green]✓[/green] 已退出登录")


@app.command("config")
def show_config(
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="导出配置文件 (.json/.yaml/.yml)", dir_okay=False
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="配置文件路径", exists=True, dir_okay=False
    ),
) -> None:
    """显示当前配置 (令牌打码), 可导出为配置文件"""
    settings = get_settings(config_path)
    table = Table(title="product-admin 配置")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.to_dict().items():
        table.add_row(key, "" if value is None else str(value))
    console.print(table)

    if output is not None:
        try:
            settings.save_to_file(output)
        except ValueError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc
        console.print(f"[green]✓[/green] 配置已导出: {output}")


@app.command()
def version() -> None:
    """显示版本信息"""
    from . import __version__

    console.print(f"product-admin v{__version__}")


def main() -> None:
    """控制台入口."""
    app()


if __name__ == "__main__":
    main()
