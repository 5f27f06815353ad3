"""HS Code Classifier module."""
from .hs_classifier import HSCodeClassifier, identify_hs_code
from .prompt_compiler import PromptCompiler
from .response_parser import ResponseParser
from .post_processor import post_process

__all__ = ['HSCodeClassifier', 'identify_hs_code', 'PromptCompiler', 'ResponseParser', 'post_process']
