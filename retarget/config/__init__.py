# Chain presets and configuration loading
