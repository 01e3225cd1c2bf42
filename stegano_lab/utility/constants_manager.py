from dotenv import load_dotenv, find_dotenv
import os


class ConstantsManager:
    _dotenv_loaded = False

    def __init__(self):
        if not ConstantsManager._dotenv_loaded:
            load_dotenv(dotenv_path=find_dotenv(usecwd=True), override=False)
            ConstantsManager._dotenv_loaded = True

    def get_variable(self, variableName, default=None):
        variable = os.environ.get(variableName, "")
        if variable == "":
            if default is None:
                raise Exception(f"Could not find {variableName} environment variable")
            return default
        return variable

    def get_int(self, variableName, default):
        value = self.get_variable(variableName, str(default))
        try:
            return int(value)
        except ValueError as exc:
            raise Exception(f"{variableName} must be an integer, got {value!r}") from exc

    def get_log_level(self):
        return self.get_variable('STEGANO_LOG_LEVEL', 'INFO').upper()

    def get_default_output_format(self):
        return self.get_variable('STEGANO_DEFAULT_OUTPUT_FORMAT', 'png')

    def get_max_output_pixels(self):
        return self.get_int('STEGANO_MAX_OUTPUT_PIXELS', 50_000_000)

    def get_png_compress_level(self):
        return self.get_int('STEGANO_PNG_COMPRESS_LEVEL', 6)
