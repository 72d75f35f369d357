"""Main script for running the credibility checker."""

import asyncio
import logging

from .domain.errors import InputValidationError, PipelineError
from .domain.models.analysis import ComprehensiveAnalysisResult
from .infrastructure.dependencies import ServiceContainer


def print_result(result: ComprehensiveAnalysisResult) -> None:
    """Print an analysis result for the terminal."""
    assessment = result.overall_assessment
    print("\nResults:")
    print(f"Language: {result.language.detected} (translated: {result.language.was_translated})")
    print(f"Credibility: {assessment.credibility_score:.2%}")
    print(f"Risk level: {assessment.risk_level.value}")
    print(f"Confidence: {assessment.confidence:.2%}")
    print(f"\nAssessment: {assessment.reasoning}")

    if result.claims:
        print("\nClaims:")
        for i, claim in enumerate(result.claims, 1):
            print(f"{i}. [{claim.final_verdict.value}] {claim.text}")
            print(f"   score {claim.fact_check_result.credibility_score:.2f}, harm {claim.harm_potential.value}")

    if result.sources:
        print("\nSources:")
        for i, source in enumerate(result.sources, 1):
            print(f"{i}. {source.title} - {source.url}")

    print(f"\nProcessed in {result.metadata.processing_time:.0f}ms using {', '.join(result.metadata.services_used)}")


async def main():
    """Run the credibility checker."""
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    print("Credibility Checker - claim extraction and source-backed scoring")
    print("-----------------------------------------------------------------")

    container = ServiceContainer()
    orchestrator = await container.get_analysis_orchestrator()

    try:
        while True:
            # Get text from user
            text = input("\nEnter text to analyze (or 'quit' to exit): ")
            if text.lower() in ('quit', 'exit', 'q'):
                break

            print("\nAnalyzing...")
            try:
                result = await orchestrator.analyze_content(text)
                print_result(result)
            except InputValidationError as e:
                print(f"\nInvalid input: {e}")
            except PipelineError as e:
                print(f"\nAnalysis failed: {e}")

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
