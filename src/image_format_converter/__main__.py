from image_format_converter.cli.main import main


if __name__ == "__main__":
    main()
