"""
Display Utilities - Terminal output for the CLI
"""

def print_banner():
    """
    Prints the graphql-headerkit banner.
    """
    banner = r"""
    ╔═══════════════════════════════════════════════════════════╗
    ║                                                           ║
    ║        ⛓  GRAPHQL HEADERKIT  ⛓                            ║
    ║                                                           ║
    ║        Resource-name headers for GraphQL requests         ║
    ║                                                           ║
    ╚═══════════════════════════════════════════════════════════╝
    """
    print(banner)

def print_config_summary(config_dict):
    """
    Prints a sanitized summary of the current configuration.
    """
    print("\n🔧 Current Configuration Summary:")
    print("─────────────────────────────────────────────")
    for key, value in config_dict.items():
        # Mask sensitive keys
        if any(secret in key.upper() for secret in ["PASSWORD", "SECRET", "KEY", "TOKEN"]):
            display_value = "********"
        else:
            display_value = value
        print(f"• {key}: {display_value}")
    print("─────────────────────────────────────────────\n")

def print_header_lines(headers):
    """
    Prints ``Name: value`` lines, one per header.
    """
    for name, value in headers.items():
        print(f"{name}: {value}")
