"""User-facing message catalog (zh/en).

Every line the CLI prints goes through `t()`, so switching
`SNELL_DEPLOY_LANGUAGE` changes the whole interface.
"""

from __future__ import annotations

from core.domain.language import Language

_CATALOG: dict[str, dict[Language, str]] = {
    "need_root": {
        Language.CHINESE: "此脚本需要以 root 权限运行。请使用 sudo 命令。",
        Language.ENGLISH: "This action must be run as root. Please use sudo.",
    },
    "unsupported_os": {
        Language.CHINESE: "此脚本只支持 Debian 或 Ubuntu 系统。",
        Language.ENGLISH: "Only Debian or Ubuntu systems are supported.",
    },
    "installing_tool": {
        Language.CHINESE: "正在安装 {tool}...",
        Language.ENGLISH: "Installing {tool}...",
    },
    "installing_docker": {
        Language.CHINESE: "正在安装 Docker...",
        Language.ENGLISH: "Installing Docker...",
    },
    "installing_compose": {
        Language.CHINESE: "正在安装 Docker Compose...",
        Language.ENGLISH: "Installing Docker Compose...",
    },
    "generating_credentials": {
        Language.CHINESE: "正在生成随机端口和密码...",
        Language.ENGLISH: "Generating random port and PSK...",
    },
    "writing_configs": {
        Language.CHINESE: "正在写入配置文件...",
        Language.ENGLISH: "Writing configuration files...",
    },
    "downloading": {
        Language.CHINESE: "正在下载 Snell {version} ({arch})...",
        Language.ENGLISH: "Downloading Snell {version} ({arch})...",
    },
    "starting": {
        Language.CHINESE: "正在启动服务...",
        Language.ENGLISH: "Starting the service...",
    },
    "start_failed": {
        Language.CHINESE: "错误：无法启动 Docker 服务。请检查 Docker Compose 文件和日志。",
        Language.ENGLISH: "Error: could not start the Docker service. Check the compose file and logs.",
    },
    "install_done": {
        Language.CHINESE: "初始安装完成。",
        Language.ENGLISH: "Initial installation complete.",
    },
    "install_failed": {
        Language.CHINESE: "安装失败：{error}",
        Language.ENGLISH: "Installation failed: {error}",
    },
    "updating": {
        Language.CHINESE: "正在更新 Snell...",
        Language.ENGLISH: "Updating Snell...",
    },
    "update_failed": {
        Language.CHINESE: "启动 Snell 服务失败。请检查配置文件和日志。",
        Language.ENGLISH: "Failed to start Snell. Check the configuration and logs.",
    },
    "update_done": {
        Language.CHINESE: "Snell 已更新并重启。",
        Language.ENGLISH: "Snell has been updated and restarted.",
    },
    "restarting": {
        Language.CHINESE: "正在重启 Snell...",
        Language.ENGLISH: "Restarting Snell...",
    },
    "restart_failed": {
        Language.CHINESE: "Snell 重启失败，请检查配置文件和日志。",
        Language.ENGLISH: "Snell failed to restart. Check the configuration and logs.",
    },
    "restart_done": {
        Language.CHINESE: "Snell 已成功重启。",
        Language.ENGLISH: "Snell restarted successfully.",
    },
    "deleting": {
        Language.CHINESE: "正在删除 Snell...",
        Language.ENGLISH: "Deleting Snell...",
    },
    "delete_failed": {
        Language.CHINESE: "删除 Snell 失败：{error}",
        Language.ENGLISH: "Failed to delete Snell: {error}",
    },
    "delete_done": {
        Language.CHINESE: "Snell 已成功删除。",
        Language.ENGLISH: "Snell deleted successfully.",
    },
    "compose_missing": {
        Language.CHINESE: "错误：docker-compose.yml 文件不存在。",
        Language.ENGLISH: "Error: docker-compose.yml does not exist.",
    },
    "compose_missing_hint": {
        Language.CHINESE: "您可能需要运行初始安装来生成配置文件。",
        Language.ENGLISH: "You may need to run the initial installation to generate it.",
    },
    "config_missing": {
        Language.CHINESE: "Snell配置文件不存在。",
        Language.ENGLISH: "The Snell configuration file does not exist.",
    },
    "info_failed": {
        Language.CHINESE: "无法获取连接信息：{error}",
        Language.ENGLISH: "Could not build the connection info: {error}",
    },
    "container_status": {
        Language.CHINESE: "容器状态：{status}",
        Language.ENGLISH: "Container status: {status}",
    },
    "container_absent": {
        Language.CHINESE: "容器未运行",
        Language.ENGLISH: "container not running",
    },
    "container_unknown": {
        Language.CHINESE: "未知（无法查询 Docker）",
        Language.ENGLISH: "unknown (Docker not reachable)",
    },
    "menu_title": {
        Language.CHINESE: "请选择操作：",
        Language.ENGLISH: "Choose an action:",
    },
    "menu_install": {
        Language.CHINESE: "初始安装",
        Language.ENGLISH: "Initial install",
    },
    "menu_update": {
        Language.CHINESE: "更新 Snell",
        Language.ENGLISH: "Update Snell",
    },
    "menu_restart": {
        Language.CHINESE: "重启 Snell",
        Language.ENGLISH: "Restart Snell",
    },
    "menu_info": {
        Language.CHINESE: "显示连接信息",
        Language.ENGLISH: "Show connection info",
    },
    "menu_delete": {
        Language.CHINESE: "删除 Snell",
        Language.ENGLISH: "Delete Snell",
    },
    "menu_exit": {
        Language.CHINESE: "退出脚本",
        Language.ENGLISH: "Exit",
    },
    "menu_prompt": {
        Language.CHINESE: "请输入选项",
        Language.ENGLISH: "Enter an option",
    },
    "menu_invalid": {
        Language.CHINESE: "无效选项，请重新选择",
        Language.ENGLISH: "Invalid option, please choose again",
    },
    "menu_continue": {
        Language.CHINESE: "按回车键继续...",
        Language.ENGLISH: "Press Enter to continue...",
    },
    "settings_saved": {
        Language.CHINESE: "设置已保存到：{path}",
        Language.ENGLISH: "Settings saved to: {path}",
    },
}


def t(key: str, language: Language = Language.CHINESE, **kwargs: object) -> str:
    """Look up `key` in `language`, falling back to English, then to the key."""

    entry = _CATALOG.get(key)
    if entry is None:
        return key
    template = entry.get(language) or entry.get(Language.ENGLISH, key)
    return template.format(**kwargs) if kwargs else template


def known_keys() -> frozenset[str]:
    return frozenset(_CATALOG)
