from .output import AgentResult, decode_agent_result, extract_json_object
from .runner import ProcessBridge
from .resolver import ExecutableResolver, candidate_executable_paths
from .environment import find_binary, build_process_environment

__all__ = [
    "AgentResult",
    "ExecutableResolver",
    "ProcessBridge",
    "build_process_environment",
    "candidate_executable_paths",
    "decode_agent_result",
    "extract_json_object",
    "find_binary",
]
