from __future__ import annotations

import io
import struct
import sys
import zipfile
from pathlib import Path
from typing import Callable, Mapping

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from wppb.config import ScaffoldRequest  # noqa: E402

ARCHIVE_URL = "https://archive.test/WordPress-Plugin-Boilerplate/master.zip"
ARCHIVE_ROOT = "WordPress-Plugin-Boilerplate-master"

MAIN_PLUGIN_FILE = """<?php
/**
 * @link              http://example.com
 * @since             1.0.0
 * @package           Plugin_Name
 *
 * @wordpress-plugin
 * Plugin Name:       WordPress Plugin Boilerplate
 * Plugin URI:        http://example.com/plugin-name-uri/
 * Description:       This is a short description of what the plugin does. It's displayed in the WordPress admin area.
 * Version:           1.0.0
 * Author:            Your Name or Your Company
 * Author URI:        http://example.com/
 * Text Domain:       plugin-name
 */

define( 'PLUGIN_NAME_VERSION', '1.0.0' );

require plugin_dir_path( __FILE__ ) . 'includes/class-plugin-name.php';

function run_plugin_name() {
\t$plugin = new Plugin_Name();
\t$plugin->run();
}
"""

CORE_CLASS_FILE = """<?php
/**
 * @package    Plugin_Name
 * @subpackage Plugin_Name/includes
 * @author     Your Name <email@example.com>
 */
class Plugin_Name {
\tpublic function __construct() {
\t\tif ( defined( 'PLUGIN_NAME_VERSION' ) ) {
\t\t\t$this->version = PLUGIN_NAME_VERSION;
\t\t}
\t\t$this->plugin_name = 'plugin-name';
\t}
}
"""


def build_zip(entries: Mapping[str, str | bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def boilerplate_entries(root: str = ARCHIVE_ROOT) -> dict[str, str | bytes]:
    return {
        f"{root}/": "",
        f"{root}/README.md": "# WordPress Plugin Boilerplate\n",
        f"{root}/plugin-name/": "",
        f"{root}/plugin-name/plugin-name.php": MAIN_PLUGIN_FILE,
        f"{root}/plugin-name/includes/class-plugin-name.php": CORE_CLASS_FILE,
        f"{root}/plugin-name/admin/css/plugin-name-admin.css": "/* plugin-name admin */\n",
        f"{root}/plugin-name/admin/images/logo.png": b"\x89PNG\r\n\x1a\n\x00\xff\xfe",
        f"{root}/plugin-name/languages/plugin-name.pot": "# Plugin_Name translations\n",
    }


def corrupt_member_zip(name: str = "root/plugin.php") -> bytes:
    """Zip with a valid central directory whose deflated member data is garbage."""

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(name, "<?php echo 'plugin-name';\n" * 200)
    with zipfile.ZipFile(io.BytesIO(buffer.getvalue())) as archive:
        info = archive.getinfo(name)

    data = bytearray(buffer.getvalue())
    name_length, extra_length = struct.unpack(
        "<HH", data[info.header_offset + 26 : info.header_offset + 30]
    )
    start = info.header_offset + 30 + name_length + extra_length
    for index in range(start, start + info.compress_size):
        data[index] ^= 0xFF
    return bytes(data)


@pytest.fixture()
def archive_url() -> str:
    return ARCHIVE_URL


@pytest.fixture()
def make_zip() -> Callable[[Mapping[str, str | bytes]], bytes]:
    return build_zip


@pytest.fixture()
def corrupt_zip() -> bytes:
    return corrupt_member_zip()


@pytest.fixture()
def boilerplate_zip() -> bytes:
    return build_zip(boilerplate_entries())


@pytest.fixture()
def sample_request() -> ScaffoldRequest:
    return ScaffoldRequest(
        plugin_name="Sample Plugin",
        plugin_slug="sample-plugin",
        plugin_url="https://example.com",
        author_name="John Doe",
        author_email="john@example.com",
        author_url="https://example.com",
        plugin_description="A sample.",
    )
