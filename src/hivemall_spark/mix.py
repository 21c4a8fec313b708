"""
Injection of mix-server options into distributed training calls.

Hivemall trainers can synchronise their weights through MIX servers. When the
``HIVEMALL_MIX_SERVERS`` environment variable names one or more servers, the
training call gets an option string pointing at them and a session id shared by
all of its tasks.

The variable is read on the driver, so it only takes effect when the driver
runs locally (``--deploy-mode client``); otherwise it has to be set on every
worker as well.
"""

import logging
import os
import uuid
from typing import Callable, List, Optional, Sequence, Union

from pyspark.sql import Column
from pyspark.sql import functions as F

from .utils.config_parser import MIX_SERVERS_ENV

logger = logging.getLogger(__name__)


def mix_session_id(application_id: str) -> str:
    return f"{application_id}-{uuid.uuid4()}"


def mix_option(mix_servers: str, session_id: str) -> str:
    return f"-mix {mix_servers} -mix_session {session_id}"


def resolve_mix_servers(mix_servers: Optional[str] = None) -> Optional[str]:
    if mix_servers is not None:
        return mix_servers
    return os.environ.get(MIX_SERVERS_ENV)


def set_mix_servers(exprs: Sequence[Column],
                    application_id: Union[str, Callable[[], str]],
                    mix_servers: Optional[str] = None) -> List[Column]:
    """
    Append a ``-mix`` option to the arguments of a training function.

    Args:
        exprs: Arguments of the training call
        application_id: Spark application id used as the session prefix, or a
            callable returning it; the callable is only invoked when servers are set
        mix_servers: Servers to use; defaults to HIVEMALL_MIX_SERVERS

    Returns:
        The arguments, with the option literal appended when servers are set
        and exactly two arguments were given
    """
    exprs = list(exprs)
    mixes = resolve_mix_servers(mix_servers)
    if not mixes:
        return exprs

    if callable(application_id):
        application_id = application_id()
    session_id = mix_session_id(application_id)
    logger.warning(f"set '{mixes}' as default mix servers (session: {session_id})")

    if len(exprs) == 2:
        return exprs + [F.lit(mix_option(mixes, session_id))]
    # TODO: merge the -mix option into an existing option string (three arguments)
    return exprs
