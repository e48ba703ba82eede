import hydra
from omegaconf import DictConfig, OmegaConf

from chipcore.logging import configure, get_logger


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    configure(level=cfg.log_level)
    logger = get_logger("run")
    logger.debug("Configuration:\n" + OmegaConf.to_yaml(cfg))

    rom = hydra.utils.to_absolute_path(cfg.rom)

    if cfg.headless:
        from chipcore.headless import run_headless
        run_headless(rom, cfg.steps, core_freq=cfg.core_freq, seed=cfg.seed, progress=cfg.progress)
    else:
        from chipcore.frontend import run_window
        run_window(
            rom,
            core_freq=cfg.core_freq,
            fps=cfg.fps,
            scale=cfg.scale,
            color_scheme=cfg.color_scheme,
            seed=cfg.seed,
        )


if __name__ == "__main__":
    main()
