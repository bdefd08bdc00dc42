from vibecoding.services.file_store import GeneratedCodeStore, generated_code_store
from vibecoding.services.code_generator import CodeGenerator, code_generator
