# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exception types raised by the CV compiler.

The compiler and the watermark post-processor are leaf functions: they raise
one of these and never return a partial document or artifact.
"""


class CVCompilerError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(CVCompilerError):
    """A style token (or override colour) could not be resolved to a concrete value."""


class RenderError(CVCompilerError):
    """Mandatory content is missing, so no valid document can be produced."""


class WatermarkError(CVCompilerError):
    """The export artifact could not be watermarked."""


class SourceError(CVCompilerError):
    """An input file or URL could not be read."""


class ProtocolError(CVCompilerError):
    """An edit-surface message did not match the wire protocol."""


class ChannelClosedError(CVCompilerError):
    """A message was sent or received on a disposed edit channel."""
