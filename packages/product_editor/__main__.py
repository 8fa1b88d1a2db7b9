"""
@PURPOSE: 使 product_editor 可以作为模块运行
@OUTLINE:
  - 导入并运行 cli.py 中的 app
@DEPENDENCIES:
  - 内部: packages.product_editor.cli
"""

from packages.product_editor.cli import app

if __name__ == "__main__":
    app()
