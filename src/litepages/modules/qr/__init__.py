from litepages.modules.qr.generator import generate_qr_png, qr_data_uri

__all__ = ["generate_qr_png", "qr_data_uri"]
