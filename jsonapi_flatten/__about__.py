__version__ = "1.0.0"
__description__ = "jsonapi_flatten : JSON:API document flattening parser"
