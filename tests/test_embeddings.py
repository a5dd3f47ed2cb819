"""
Unit tests for the embeddings module.
"""
from unittest.mock import Mock, patch

import pytest
import requests

from domain.errors import EmbeddingServiceError
from domain.models import TextChunk
from embeddings import create_embedder, list_providers
from embeddings.base import DummyEmbedding, EmbeddingConfig
from embeddings.providers.gemini import GeminiEmbedding
from embeddings.providers.ollama import OllamaEmbedding
from tests.conftest import RecordingEmbedding


def _chunks(*texts, source_file="a.pdf"):
    return [TextChunk(source_file=source_file, sequence_index=i, content=t) for i, t in enumerate(texts)]


def _response(json_body, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = json_body
    response.raise_for_status.return_value = None
    return response


class TestEmbeddingConfig:
    """Tests para la configuración de embeddings"""

    def test_default_config(self):
        """Prueba configuración por defecto"""
        config = EmbeddingConfig()
        assert config.model_name == "text-embedding-004"
        assert config.dimension == 768
        assert config.timeout == 30
        assert config.max_input_chars == 8000
        assert config.normalize is False

    @pytest.mark.parametrize("field,message", [
        ("dimension", "dimension debe ser mayor a 0"),
        ("timeout", "timeout debe ser mayor a 0"),
        ("max_input_chars", "max_input_chars debe ser mayor a 0"),
    ])
    def test_validate_invalid(self, field, message):
        """Prueba validación de valores inválidos"""
        config = EmbeddingConfig(**{field: 0})
        with pytest.raises(ValueError, match=message):
            config.validate()


class TestDummyEmbedding:
    """Tests para DummyEmbedding"""

    def test_deterministic(self):
        """Prueba que el mismo texto da el mismo vector"""
        embedder = DummyEmbedding(EmbeddingConfig(dimension=16))
        assert embedder.embed_text("hola") == embedder.embed_text("hola")
        assert embedder.embed_text("hola") != embedder.embed_text("chau")

    def test_zeros(self):
        """Prueba vectores en cero"""
        embedder = DummyEmbedding(EmbeddingConfig(dimension=4), use_zeros=True)
        assert embedder.embed_text("x") == [0.0, 0.0, 0.0, 0.0]

    def test_normalize(self):
        """Prueba normalización L2"""
        embedder = DummyEmbedding(EmbeddingConfig(dimension=32, normalize=True))
        vector = embedder.embed_text("texto")
        assert abs(sum(x * x for x in vector) - 1.0) < 1e-6


class TestEmbedBatch:
    """Tests para embed_batch"""

    def test_one_call_per_chunk_in_order(self):
        """Prueba una llamada por chunk, en orden"""
        embedder = RecordingEmbedding(dimension=4)
        vectors = embedder.embed_batch(_chunks("uno", "dos", "tres"))

        assert embedder.calls == ["uno", "dos", "tres"]
        assert [v.chunk_index for v in vectors] == [0, 1, 2]
        assert all(v.dimension == 4 for v in vectors)

    def test_empty_batch(self):
        """Prueba lote vacío sin llamadas"""
        embedder = RecordingEmbedding()
        assert embedder.embed_batch([]) == []
        assert embedder.calls == []

    def test_failure_aborts_batch(self):
        """Prueba que el primer error corta el lote"""
        embedder = RecordingEmbedding(fail_on=[2])
        with pytest.raises(EmbeddingServiceError) as exc_info:
            embedder.embed_batch(_chunks("a", "b", "c", "d", "e"))

        assert len(embedder.calls) == 2
        assert exc_info.value.file_name == "a.pdf"
        assert exc_info.value.step == "embedding"
        assert "chunk 1" in str(exc_info.value)
        assert "quota exceeded" in str(exc_info.value)

    def test_input_over_limit(self):
        """Prueba texto que excede el límite del servicio"""
        embedder = RecordingEmbedding(max_input_chars=5)
        with pytest.raises(EmbeddingServiceError, match="exceeds limit"):
            embedder.embed_text("123456")
        assert embedder.calls == []

    def test_wrong_dimension_response(self):
        """Prueba respuesta con dimensión incorrecta"""
        embedder = DummyEmbedding(EmbeddingConfig(dimension=4))
        with patch.object(embedder, "_request_embedding", return_value=[0.1, 0.2]):
            with pytest.raises(EmbeddingServiceError, match="expected dimension 4"):
                embedder.embed_text("x")

    def test_non_numeric_response(self):
        """Prueba respuesta con valores no numéricos"""
        embedder = DummyEmbedding(EmbeddingConfig(dimension=2))
        with patch.object(embedder, "_request_embedding", return_value=["a", "b"]):
            with pytest.raises(EmbeddingServiceError, match="non-numeric"):
                embedder.embed_text("x")


class TestFactory:
    """Tests para el registro de proveedores"""

    def test_registered_providers(self):
        """Prueba que los proveedores se registran al importar"""
        providers = list_providers()
        assert {"dummy", "gemini", "ollama"} <= set(providers)

    def test_create_dummy(self):
        """Prueba creación por nombre"""
        embedder = create_embedder("dummy", EmbeddingConfig(dimension=3))
        assert isinstance(embedder, DummyEmbedding)
        assert embedder.get_dimension() == 3

    def test_unknown_provider(self):
        """Prueba proveedor desconocido"""
        with pytest.raises(ValueError, match="Unknown embedding provider"):
            create_embedder("openai", EmbeddingConfig())

    def test_provider_name_is_case_insensitive(self):
        """Prueba nombres con mayúsculas o espacios desde la configuración"""
        embedder = create_embedder(" Dummy ", EmbeddingConfig(dimension=3))
        assert isinstance(embedder, DummyEmbedding)


class TestGeminiEmbedding:
    """Tests para GeminiEmbedding"""

    def test_missing_api_key(self):
        """Prueba que falta la API key"""
        with pytest.raises(EmbeddingServiceError, match="GEMINI_API_KEY"):
            GeminiEmbedding(EmbeddingConfig(dimension=3))

    @patch("embeddings.providers.http.requests.post")
    def test_request(self, mock_post):
        """Prueba el formato de la llamada y la respuesta"""
        mock_post.return_value = _response({"embedding": {"values": [0.1, 0.2, 0.3]}})
        embedder = create_embedder("gemini", EmbeddingConfig(dimension=3), api_key="secret")

        assert embedder.embed_text("hola") == [0.1, 0.2, 0.3]

        args, kwargs = mock_post.call_args
        assert args[0].endswith("/models/text-embedding-004:embedContent")
        assert kwargs["headers"] == {"x-goog-api-key": "secret"}
        assert kwargs["json"]["content"] == {"parts": [{"text": "hola"}]}
        assert kwargs["timeout"] == 30

    @patch("embeddings.providers.http.requests.post")
    def test_malformed_response(self, mock_post):
        """Prueba respuesta sin el campo embedding"""
        mock_post.return_value = _response({"error": "nope"})
        embedder = GeminiEmbedding(EmbeddingConfig(dimension=3), api_key="secret")
        with pytest.raises(EmbeddingServiceError, match="Unexpected response format"):
            embedder.embed_text("hola")

    @patch("embeddings.providers.http.requests.post")
    def test_http_error(self, mock_post):
        """Prueba error HTTP (cuota)"""
        response = _response({}, status_code=429)
        response.text = "RESOURCE_EXHAUSTED"
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            "429 Too Many Requests", response=response
        )
        mock_post.return_value = response
        embedder = GeminiEmbedding(EmbeddingConfig(dimension=3), api_key="secret")

        with pytest.raises(EmbeddingServiceError, match="RESOURCE_EXHAUSTED"):
            embedder.embed_text("hola")

    @patch("embeddings.providers.http.requests.post")
    def test_timeout(self, mock_post):
        """Prueba timeout de la llamada"""
        mock_post.side_effect = requests.exceptions.Timeout("slow")
        embedder = GeminiEmbedding(EmbeddingConfig(dimension=3), api_key="secret")
        with pytest.raises(EmbeddingServiceError, match="timed out"):
            embedder.embed_text("hola")


class TestOllamaEmbedding:
    """Tests para OllamaEmbedding"""

    def test_invalid_base_url(self):
        """Prueba URL base inválida"""
        with pytest.raises(EmbeddingServiceError, match="Invalid Ollama base URL"):
            OllamaEmbedding(EmbeddingConfig(dimension=2), base_url="localhost:11434")

    @patch("embeddings.providers.http.requests.post")
    def test_request(self, mock_post):
        """Prueba llamada a /api/embeddings"""
        mock_post.return_value = _response({"embedding": [1.0, 2.0]})
        embedder = OllamaEmbedding(EmbeddingConfig(model_name="nomic-embed-text", dimension=2))

        assert embedder.embed_text("hola") == [1.0, 2.0]
        args, kwargs = mock_post.call_args
        assert args[0] == "http://localhost:11434/api/embeddings"
        assert kwargs["json"] == {"model": "nomic-embed-text", "prompt": "hola"}

    @patch("embeddings.providers.http.requests.post")
    def test_connection_error(self, mock_post):
        """Prueba error de conexión"""
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")
        embedder = OllamaEmbedding(EmbeddingConfig(dimension=2))
        with pytest.raises(EmbeddingServiceError, match="Failed to connect"):
            embedder.embed_text("hola")

    @pytest.mark.parametrize("body", [None, 42, [1.0, 2.0]])
    @patch("embeddings.providers.http.requests.post")
    def test_non_object_response(self, mock_post, body):
        """Prueba respuesta 200 cuyo cuerpo no es un objeto JSON"""
        mock_post.return_value = _response(body)
        embedder = OllamaEmbedding(EmbeddingConfig(dimension=2))
        with pytest.raises(EmbeddingServiceError, match="Unexpected response format"):
            embedder.embed_text("hola")
