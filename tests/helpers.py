from dynawire.bootstrap import deps


def clear_deps_cache() -> None:
    deps.get_config.cache_clear()
    deps.get_encoder.cache_clear()
    deps.get_decoder.cache_clear()
    deps.get_builder.cache_clear()
