from tooltrack.main import launch

if __name__ == "__main__":
    launch()
