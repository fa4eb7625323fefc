"""Request and response models for code generation."""

from typing import Literal, get_args

from pydantic import BaseModel, Field


Language = Literal[
    # Programming languages
    "assembly", "c", "cpp", "csharp", "java", "python", "javascript",
    "typescript", "swift", "kotlin", "rust", "go", "php", "ruby", "dart", "r",
    "scala", "perl", "lua", "haskell",
    # Web development
    "html", "css", "react", "angular", "vue", "svelte", "nextjs", "nuxtjs",
    "tailwindcss",
    # Backend and databases
    "nodejs", "django", "flask", "express", "springboot", "aspnet", "laravel",
    "graphql", "rest", "mysql",
    # Security
    "hashing", "encryption",
    # AI and ML
    "tensorflow", "pytorch", "neuralnetwork", "deeplearning", "nlp",
    "reinforcementlearning",
    # Shell scripting
    "powershell", "bash", "batch",
    # Others
    "blockchain", "smartcontract", "quantum", "microservices", "docker",
    "kubernetes",
]  # fmt: skip

Category = Literal[
    "Programming Languages",
    "Web Development",
    "Backend & Databases",
    "Security",
    "AI & Machine Learning",
    "Shell Scripting",
    "DevOps & Cloud",
    "Blockchain & Web3",
    "Other",
]

SUPPORTED_LANGUAGES: tuple[str, ...] = get_args(Language)
CATEGORIES: tuple[str, ...] = get_args(Category)


class CodeGenerationRequest(BaseModel):
    """Body of POST /api/generate."""

    prompt: str = Field(..., min_length=1, max_length=1000)
    language: Language
    category: Category | None = None


class CodeGenerationResponse(BaseModel):
    code: str
