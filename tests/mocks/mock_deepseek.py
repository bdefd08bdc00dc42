"""
Mock DeepSeek Client for Testing
Provides canned responses without calling the actual API
"""
from typing import AsyncGenerator, Dict, List, Optional, Any


class MockDeepSeekClient:
    """Mock DeepSeek client that returns predefined responses"""

    def __init__(self):
        self.call_count = 0
        self.last_messages: Optional[List[Dict[str, str]]] = None
        self.last_max_tokens: Optional[int] = None
        self.response = 'Mock response from DeepSeek'
        self.chunk_size = 7
        self.error: Optional[Exception] = None
        self.fail_after_chunks: Optional[int] = None

    def set_response(self, response: str, chunk_size: int = 7):
        """Set the text returned by chat() and streamed by chat_stream()"""
        self.response = response
        self.chunk_size = chunk_size

    def set_error(self, error: Exception, after_chunks: Optional[int] = None):
        """Raise error immediately, or mid-stream after a number of chunks"""
        self.error = error
        self.fail_after_chunks = after_chunks

    def _record(self, messages, max_tokens):
        self.call_count += 1
        self.last_messages = messages
        self.last_max_tokens = max_tokens

    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> Dict[str, Any]:
        """Mock non-streaming completion"""
        self._record(messages, max_tokens)
        if self.error is not None:
            raise self.error
        return {
            'content': self.response,
            'model': 'deepseek-chat',
            'input_tokens': 10,
            'output_tokens': len(self.response.split()),
            'total_tokens': 10 + len(self.response.split()),
            'id': 'mock-completion',
        }

    async def chat_stream(
        self,
        messages: List[Dict[str, str]],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> AsyncGenerator[str, None]:
        """Mock streaming completion, yields fixed-size chunks"""
        self._record(messages, max_tokens)
        if self.error is not None and self.fail_after_chunks is None:
            raise self.error

        for i, start in enumerate(range(0, len(self.response), self.chunk_size)):
            if self.error is not None and i == self.fail_after_chunks:
                raise self.error
            yield self.response[start:start + self.chunk_size]

    def reset(self):
        """Reset mock state"""
        self.__init__()


SAMPLE_PROJECT_STREAM = """I'll build a small counter page.

FILE:index.html
LANGUAGE:html
CONTENT:
<!DOCTYPE html>
<html>
<head>
  <link rel="stylesheet" href="css/style.css">
</head>
<body>
  <button id="count">0</button>
  <script src="./js/app.js"></script>
</body>
</html>
ENDFILE
FILE:css/style.css
LANGUAGE:css
CONTENT:
button { font-size: 2rem; }
ENDFILE
FILE:js/app
LANGUAGE:javascript
CONTENT:
const b = document.getElementById("count");
b.onclick = () => { b.textContent = Number(b.textContent) + 1; };
ENDFILE
"""
