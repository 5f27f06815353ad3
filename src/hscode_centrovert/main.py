from pathlib import Path
from loguru import logger
from hscode_centrovert.classifier.hs_classifier import HSCodeClassifier
from hscode_centrovert.exceptions import ClassificationError
from hscode_centrovert.models.hs_models import ImagePayload, TargetRegion
from hscode_centrovert.utils.formatters import format_report
from hscode_centrovert.utils.logging_utils import setup_logger, log_system_startup, log_system_error, log_system_success

IMAGE_MIME_TYPES = {
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.webp': 'image/webp',
    '.heic': 'image/heic',
}

def setup_logging():
    """Configure logging settings with proper initialization."""
    try:
        setup_logger("cli")
        log_system_startup("HS Code Classification Assistant")
        return True
    except Exception as e:
        print(f"Failed to setup logging: {e}")
        return False

def print_regions():
    print("\nAvailable regions:")
    for i, region in enumerate(TargetRegion, 1):
        print(f"  {i:>2}. {region.value}")

def resolve_region(choice, current):
    """Resolve a region from a list index or name, keeping the current one on bad input."""
    choice = choice.strip()
    if not choice:
        return current
    regions = list(TargetRegion)
    if choice.isdigit() and 1 <= int(choice) <= len(regions):
        return regions[int(choice) - 1]
    try:
        return TargetRegion.from_value(choice)
    except ValueError:
        print(f"Unknown region '{choice}', keeping {current.value}")
        return current

def load_image(path_text):
    """Read an image file into an ImagePayload."""
    path = Path(path_text.strip().strip('"')).expanduser()
    if not path.is_file():
        print(f"Image not found: {path}")
        return None
    mime_type = IMAGE_MIME_TYPES.get(path.suffix.lower(), 'image/jpeg')
    logger.info(f"Attached image {path} ({mime_type})")
    return ImagePayload(data=path.read_bytes(), mime_type=mime_type)

def main():
    """Main entry point for the HS code classification assistant."""
    if not setup_logging():
        print("Warning: Logging setup failed, continuing without proper logging")

    try:
        log_system_startup("System Initialization")
        classifier = HSCodeClassifier()
        region = TargetRegion.SINGAPORE
        image = None

        logger.info("System initialization completed successfully")

        print("\nHS Code Classification Assistant")
        print("Enter 'quit' to exit")
        print("Enter 'regions' to list regions, 'region <name|number>' to switch")
        print("Enter 'image <path>' to attach a product photo, 'image clear' to remove it\n")

        while True:
            description = input(f"[{region.value}] Enter product description: ").strip()
            command = description.lower()

            if command == 'quit':
                logger.info("User requested system shutdown")
                break

            if command == 'regions':
                print_regions()
                continue

            if command.startswith('region '):
                region = resolve_region(description[len('region '):], region)
                print(f"Target region: {region.value}")
                continue

            if command.startswith('image '):
                argument = description[len('image '):]
                image = None if argument.strip().lower() == 'clear' else load_image(argument)
                print("Image attached" if image else "No image attached")
                continue

            if not description and image is None:
                print("Please enter a valid description")
                continue

            try:
                logger.info(f"Processing classification request: {description[:100]}...")
                result = classifier.identify(
                    description, region, image=image,
                    on_status=lambda status: print(f"  ... {status}")
                )
                print()
                log_system_success("Classification", f"{result.hs_code} for {region.value}")
                print(format_report(result, region.value))
                print()
                image = None

            except ClassificationError as e:
                log_system_error("Classification", str(e))
                print("Failed to classify product. Please ensure the description or image is clear, then try again.")
            except ValueError as e:
                print(f"Invalid request: {str(e)}")

    except (KeyboardInterrupt, EOFError):
        logger.info("Session ended by user")
    except Exception as e:
        log_system_error("System", str(e))
        print(f"Error initializing system: {str(e)}")

if __name__ == "__main__":
    main()
