import os
import sys
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr or open(os.devnull, "w")),
    ],
)

log = logging.getLogger("clipshelf")

_lock_file = None


def _acquire_single_instance(app_dir: str) -> bool:
    global _lock_file
    from PySide6.QtCore import QLockFile

    os.makedirs(app_dir, exist_ok=True)
    lock = QLockFile(os.path.join(app_dir, "clipshelf.lock"))
    if not lock.tryLock(100):
        return False
    _lock_file = lock
    return True


def _release_single_instance() -> None:
    global _lock_file
    if _lock_file is None:
        return
    try:
        _lock_file.unlock()
    except Exception:
        log.debug("释放单实例锁异常", exc_info=True)
    _lock_file = None


def _load_app():
    try:
        from clipshelf.qt_app import ClipShelfApp
    except ModuleNotFoundError as e:
        missing = getattr(e, "name", "") or ""
        if missing in ("PySide6", "AppKit", "Foundation", "objc"):
            sys.stderr.write(
                f"依赖缺失：{missing}\n"
                "请使用当前解释器安装依赖：\n"
                f"  {sys.executable} -m pip install -e .\n"
            )
        raise
    return ClipShelfApp


def main() -> None:
    from clipshelf.settings import default_app_dir, default_config_path, load_settings, save_settings

    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)
    if not os.path.exists(default_config_path()):
        try:
            save_settings(settings)
        except Exception:
            log.exception("保存默认配置失败")

    ClipShelfApp = _load_app()
    if not _acquire_single_instance(default_app_dir()):
        sys.stderr.write("ClipShelf 已在运行中。\n")
        raise SystemExit(0)

    try:
        app = ClipShelfApp(settings)
        raise SystemExit(app.run())
    finally:
        _release_single_instance()


if __name__ == "__main__":
    main()
