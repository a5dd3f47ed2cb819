"""
Unit tests for the chunking module.
"""
import pytest

from ingestion.chunking import DEFAULT_MAX_CHUNK_SIZE, TextChunker, split_text


class TestSplitText:
    """Tests para la función split_text"""

    def test_empty_text(self):
        """Prueba que texto vacío no genera chunks"""
        assert split_text("", 10) == []

    def test_short_text_single_chunk(self):
        """Prueba texto menor al límite"""
        chunks = split_text("hola mundo", 100, source_file="a.pdf")
        assert len(chunks) == 1
        assert chunks[0].content == "hola mundo"
        assert chunks[0].sequence_index == 0
        assert chunks[0].source_file == "a.pdf"

    def test_exact_multiple(self):
        """Prueba texto de longitud múltiplo exacto del límite"""
        chunks = split_text("abcdefghij", 5)
        assert [c.content for c in chunks] == ["abcde", "fghij"]

    def test_last_chunk_shorter(self):
        """Prueba que el último chunk puede ser más corto"""
        chunks = split_text("abcdefghijk", 5)
        assert [len(c) for c in chunks] == [5, 5, 1]

    @pytest.mark.parametrize("size", [1, 3, 7, 64, 8000])
    def test_concatenation_reproduces_text(self, size):
        """Prueba que concatenar los chunks devuelve el texto original"""
        text = "Lorem ipsum dolor sit amet.\n\n" * 50 + "fin"
        chunks = split_text(text, size)
        assert "".join(c.content for c in chunks) == text
        assert all(0 < len(c) <= size for c in chunks)

    def test_indices_are_sequential(self):
        """Prueba que los índices son 0..n-1 en orden"""
        chunks = split_text("x" * 23, 5)
        assert [c.sequence_index for c in chunks] == list(range(5))

    def test_whitespace_is_kept(self):
        """Prueba que el texto solo con espacios también se conserva"""
        chunks = split_text("   \n  ", 4)
        assert "".join(c.content for c in chunks) == "   \n  "

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size(self, size):
        """Prueba validación de max_chunk_size inválido"""
        with pytest.raises(ValueError, match="max_chunk_size debe ser mayor a 0"):
            split_text("abc", size)


class TestTextChunker:
    """Tests para la clase TextChunker"""

    def test_initialization_default(self):
        """Prueba inicialización con valores por defecto"""
        chunker = TextChunker()
        assert chunker.max_chunk_size == DEFAULT_MAX_CHUNK_SIZE == 8000

    def test_initialization_invalid(self):
        """Prueba inicialización con tamaño inválido"""
        with pytest.raises(ValueError):
            TextChunker(max_chunk_size=0)

    def test_split_uses_default_size(self):
        """Prueba que split usa el tamaño configurado"""
        chunker = TextChunker(max_chunk_size=4)
        chunks = chunker.split("abcdefgh", source_file="doc.pdf")
        assert [c.content for c in chunks] == ["abcd", "efgh"]
        assert all(c.source_file == "doc.pdf" for c in chunks)

    def test_split_override_size(self):
        """Prueba que split acepta un tamaño por llamada"""
        chunker = TextChunker(max_chunk_size=4)
        chunks = chunker.split("abcdefgh", max_chunk_size=8)
        assert len(chunks) == 1

    def test_text_of_8001_chars(self):
        """Prueba el límite por defecto con un carácter de más"""
        chunks = TextChunker().split("a" * 8001)
        assert [len(c) for c in chunks] == [8000, 1]

    def test_estimate_count(self):
        """Prueba la estimación de cantidad de chunks"""
        chunker = TextChunker(max_chunk_size=10)
        assert chunker.estimate_count("") == 0
        assert chunker.estimate_count("a" * 10) == 1
        assert chunker.estimate_count("a" * 11) == 2
