import importlib

mod = "swiftize"
class LazyLoader:
    """
    Lazy loader for the swiftize functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

_mappings = {
    "convert_json_text_to_swift": (f"{mod}.jsontoswift", "convert_json_text_to_swift"),
    "convert_json_to_swift": (f"{mod}.jsontoswift", "convert_json_to_swift"),
    "infer_swift_records": (f"{mod}.schema_inference", "infer_swift_records"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
