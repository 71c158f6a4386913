def load_logging_config(level: int | str | None = None):
    import logging

    logging.basicConfig(
        level=level or logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # ゲートウェイのログは多いのでDEBUG指定時以外は抑える
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        logging.getLogger("discord").setLevel(logging.WARNING)
